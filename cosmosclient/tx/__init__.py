from .build import AuthInfo, Fee, SignerInfo, Tx, TxBody, build_unsigned_tx
from .factory import TxFactory, prepare_factory
from .messages import AnyMsg, msg_send
from .sign import KeyringSigner, Signature

__all__ = [
    "AnyMsg",
    "AuthInfo",
    "Fee",
    "KeyringSigner",
    "Signature",
    "SignerInfo",
    "Tx",
    "TxBody",
    "TxFactory",
    "build_unsigned_tx",
    "msg_send",
    "prepare_factory",
]
