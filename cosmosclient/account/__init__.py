from .keyring import Account, AccountRegistry

__all__ = ["Account", "AccountRegistry"]
