# Copyright (C) 2005  Michael Urman
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""tagcodec reads and writes ID3v2 tags.

::

    from tagcodec.id3 import ID3v23
    tag = ID3v23("song.mp3")
    tag["title"] = "You Are The One"
    tag.save()

Each supported ID3v2 revision (2.2, 2.3 and 2.4) has its own tag class.
All of them share the same field names; fields a revision cannot store
raise :class:`tagcodec.id3.ID3UnsupportedFieldError`.
"""

from tagcodec._util import TagCodecError
from tagcodec._tags import Metadata

version = (0, 1, 0)
"""Version tuple."""

version_string = ".".join(map(str, version))
"""Version string."""


__all__ = ["TagCodecError", "Metadata", "version", "version_string"]
