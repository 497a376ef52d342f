"""Service layer - request entry points over the filesystem access layer."""

from filebay.services.files import FileDescriptor, FileService, ReadQuery

__all__ = ["FileDescriptor", "FileService", "ReadQuery"]
