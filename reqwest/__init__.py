from .config import Config, config
from .errors import BadServerResponse, ResponseError, ResponseErrorKind
from .log import configure_logging
from .publisher import Cancellable, Publisher
from .request import Header, Method, Request, request
from .session import Session, close_shared_session, shared_session

__all__ = [
    'BadServerResponse',
    'Cancellable',
    'Config',
    'Header',
    'Method',
    'Publisher',
    'Request',
    'ResponseError',
    'ResponseErrorKind',
    'Session',
    'close_shared_session',
    'config',
    'configure_logging',
    'request',
    'shared_session',
]
