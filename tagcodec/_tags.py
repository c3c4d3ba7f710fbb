# Copyright (C) 2005  Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


class Metadata:
    """An abstract tag object.

    Metadata is the base class for the tag objects in tagcodec. Passing
    arguments to the constructor is the same as calling :meth:`load`
    with them.
    """

    __module__ = "tagcodec"

    filename = None

    def __init__(self, *args, **kwargs):
        if args or kwargs:
            self.load(*args, **kwargs)

    def load(self, *args, **kwargs):
        raise NotImplementedError

    def save(self, filething=None):
        """Save changes to a file."""

        raise NotImplementedError
