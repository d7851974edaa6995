from functools import lru_cache

from remotectl.core.cmd import RemoteCmd


@lru_cache
def get_cli() -> RemoteCmd:
    return RemoteCmd()
