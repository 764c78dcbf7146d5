from .runtime import DirectoryEntry, FsRuntime

__all__ = ["DirectoryEntry", "FsRuntime"]
