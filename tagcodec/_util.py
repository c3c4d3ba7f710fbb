# Copyright 2006 Joe Wreschnig
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Utility classes for tagcodec.

You should not rely on the interfaces here being stable. They are
intended for internal use in tagcodec only.
"""

from __future__ import annotations

import errno
import os
import struct
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import total_ordering, wraps
from typing import IO, Any

from tagcodec._filething import FileThing


class TagCodecError(Exception):
    """Base class for all custom exceptions in tagcodec"""

    __module__ = "tagcodec"


class EmptyInputError(TagCodecError, ValueError):
    """Neither a filename nor a file object was passed"""


def is_fileobj(fileobj: object) -> bool:
    """Returns:
        bool: if an argument passed to tagcodec should be treated as a
            file object
    """

    return not (isinstance(fileobj, (str, bytes)) or
                hasattr(fileobj, "__fspath__"))


def verify_fileobj(fileobj: IO[bytes], writable: bool = False) -> None:
    """Verifies that the passed fileobj is a file like object which
    we can use.

    Args:
        writable (bool): verify that the file object is writable

    Raises:
        ValueError: In case the object is not a file object that is readable
            (or writable if required) or is not opened in bytes mode.
    """

    try:
        data = fileobj.read(0)
    except Exception:
        if not hasattr(fileobj, "read"):
            raise ValueError(f"{fileobj!r} not a valid file object")
        raise ValueError(f"Can't read from file object {fileobj!r}")

    if not isinstance(data, bytes):
        raise ValueError(
            f"file object {fileobj!r} not opened in binary mode")

    if writable:
        try:
            fileobj.write(b"")
        except Exception:
            if not hasattr(fileobj, "write"):
                raise ValueError(f"{fileobj!r} not a valid file object")
            raise ValueError(f"Can't write to file object {fileobj!r}")


def fileobj_name(fileobj: IO[bytes]) -> str:
    """
    Returns:
        text: A potential filename for a file object. Always a valid
            path type, but might be empty or non-existent.
    """

    value = getattr(fileobj, "name", "")
    if not isinstance(value, (str, bytes)):
        value = str(value)
    if isinstance(value, bytes):
        value = os.fsdecode(value)
    return value


def loadfile(method: bool = True, writable: bool = False,
             create: bool = False) -> Callable:
    """A decorator for functions taking a `filething` as a first argument.

    Passes a FileThing instance as the first argument to the wrapped function.

    Args:
        method (bool): If the wrapped functions is a method
        writable (bool): If a filename is passed opens the file readwrite, if
            passed a file object verifies that it is writable.
        create (bool): If passed a filename that does not exist will create
            a new empty file.
    """

    def convert_file_args(args: tuple, kwargs: dict) -> tuple:
        filething = args[0] if args else None
        filename = kwargs.pop("filename", None)
        fileobj = kwargs.pop("fileobj", None)
        return filething, filename, fileobj, args[1:], kwargs

    def wrap(func: Callable) -> Callable:

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            filething, filename, fileobj, args, kwargs = \
                convert_file_args(args, kwargs)
            with _openfile(self, filething, filename, fileobj,
                           writable, create) as h:
                return func(self, h, *args, **kwargs)

        @wraps(func)
        def wrapper_func(*args, **kwargs):
            filething, filename, fileobj, args, kwargs = \
                convert_file_args(args, kwargs)
            with _openfile(None, filething, filename, fileobj,
                           writable, create) as h:
                return func(h, *args, **kwargs)

        return wrapper if method else wrapper_func

    return wrap


def convert_error(exc_src: type[BaseException],
                  exc_dest: type[BaseException]) -> Callable:
    """A decorator for reraising exceptions with a different type.
    Mostly useful for IOError.

    Errors which already belong to tagcodec are passed through unchanged,
    unless `exc_src` is one of them.

    Args:
        exc_src (type): The source exception type
        exc_dest (type): The target exception type.
    """

    passthrough = () if issubclass(exc_src, TagCodecError) else TagCodecError

    def wrap(func: Callable) -> Callable:

        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except exc_dest:
                raise
            except exc_src as err:
                if isinstance(err, passthrough):
                    raise
                raise exc_dest(err) from err

        return wrapper

    return wrap


@contextmanager
def _openfile(instance: Any, filething: Any, filename: str | None,
              fileobj: IO[bytes] | None, writable: bool,
              create: bool) -> Iterator[FileThing]:
    """yields a FileThing

    Args:
        filething: Either a file name, a file object or None
        filename: Either a file name or None
        fileobj: Either a file object or None
        writable (bool): if the file should be opened
        create (bool): if the file should be created if it doesn't exist.
            implies writable
    Raises:
        EmptyInputError: in case neither a file name nor an object is given
        OSError: In case opening the file failed
        ValueError: In case the file object is not usable
    """

    assert not create or writable

    # to allow stacked context managers, just pass the result through
    if isinstance(filething, FileThing):
        filename = filething.filename
        fileobj = filething.fileobj
        filething = None

    if filething is not None:
        if is_fileobj(filething):
            fileobj = filething
        elif hasattr(filething, "__fspath__"):
            filename = filething.__fspath__()
            if not isinstance(filename, (bytes, str)):
                raise TypeError("expected __fspath__() to return a filename")
        else:
            filename = filething

    if instance is not None:
        # XXX: take "not writable" as loading the file..
        if not writable:
            instance.filename = filename
        elif filename is None and fileobj is None:
            filename = getattr(instance, "filename", None)

    if fileobj is not None:
        verify_fileobj(fileobj, writable=writable)
        yield FileThing(fileobj, filename, filename or fileobj_name(fileobj))
    elif filename is not None:
        try:
            fileobj = open(filename, "rb+" if writable else "rb")
        except OSError as e:
            if create and e.errno == errno.ENOENT:
                assert writable
                fileobj = open(filename, "wb+")
            else:
                raise

        with fileobj:
            yield FileThing(fileobj, filename, os.fsdecode(filename))
    else:
        raise EmptyInputError("Missing filename or fileobj argument")


@total_ordering
class DictMixin:
    """Implement the dict API using keys() and __*item__ methods.

    Similar to UserDict.DictMixin, this takes a class that defines
    __getitem__, __setitem__, __delitem__, and keys(), and turns it
    into a full dict-like object.

    This class is not optimized for very large dictionaries; many
    functions have linear memory requirements. I recommend you
    override some of these functions if speed is required.
    """

    def __iter__(self):
        return iter(self.keys())

    def __has_key(self, key):
        try:
            self[key]
        except KeyError:
            return False
        else:
            return True

    __contains__ = __has_key

    def values(self):
        return [self[k] for k in self.keys()]

    def items(self):
        return list(zip(self.keys(), self.values()))

    def clear(self):
        for key in list(self.keys()):
            self.__delitem__(key)

    def pop(self, key, *args):
        if len(args) > 1:
            raise TypeError("pop takes at most two arguments")
        try:
            value = self[key]
        except KeyError:
            if args:
                return args[0]
            else:
                raise
        del self[key]
        return value

    def update(self, other=None, **kwargs):
        if other is None:
            self.update(kwargs)
            other = {}

        try:
            for key, value in other.items():
                self.__setitem__(key, value)
        except AttributeError:
            for key, value in other:
                self[key] = value

    def setdefault(self, key, default=None):
        try:
            return self[key]
        except KeyError:
            self[key] = default
            return default

    def get(self, key, default=None):
        try:
            return self[key]
        except KeyError:
            return default

    def __repr__(self):
        return repr(dict(self.items()))

    def __eq__(self, other):
        return dict(self.items()) == other

    def __lt__(self, other):
        return dict(self.items()) < other

    __hash__ = object.__hash__

    def __len__(self):
        return len(self.keys())


class DictProxy(DictMixin):
    def __init__(self, *args, **kwargs):
        self.__dict = {}
        super().__init__(*args, **kwargs)

    def __getitem__(self, key):
        return self.__dict[key]

    def __setitem__(self, key, value):
        self.__dict[key] = value

    def __delitem__(self, key):
        del self.__dict[key]

    def keys(self):
        return list(self.__dict.keys())


class cdata:
    """C character buffer to Python numeric type conversions."""

    ushort_be = staticmethod(lambda data: struct.unpack('>H', data)[0])


def read_full(fileobj: IO[bytes], size: int) -> bytes:
    """Like fileobj.read but raises EOFError if not all requested data is
    returned.

    If you want to distinguish EOFError and other IO errors, don't
    read from the stream in the same call.
    """

    if size < 0:
        raise ValueError("size must not be negative")

    data = fileobj.read(size)
    if len(data) != size:
        raise EOFError(f"expected {size} bytes, got {len(data)}")
    return data
