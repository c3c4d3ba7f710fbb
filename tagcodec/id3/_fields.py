# Copyright 2006 Joe Wreschnig
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Typed access to the frames of a tag.

Every version has a table mapping field names ("title", "tracknumber",
...) to a shape, which knows which frames back the field and how to turn
their raw values into Python values and back. A field missing from a
version's table can't be used with that version at all.
"""

from __future__ import annotations

import datetime
import re
from io import BytesIO
from typing import TYPE_CHECKING, Any, ClassVar, override

from PIL import Image

from tagcodec._constants import GENRES, genre_code
from tagcodec._util import DictMixin

from ._frames import APIC
from ._specs import Encoding, PictureType
from ._util import (
    ID3OddLengthError,
    ID3TagNotFoundError,
    ID3TagShapeError,
    ID3UnknownGenreError,
    ID3UnsupportedEncodingError,
    ID3UnsupportedFieldError,
    parse_int,
)

if TYPE_CHECKING:
    from ._tags import ID3Tags


class Shape:
    """How one field is stored in frames."""

    keys: tuple[str, ...] = ()

    def present(self, tag: ID3Tags) -> bool:
        return any(key in tag.frames for key in self.keys)

    def get(self, tag: ID3Tags) -> Any:
        raise NotImplementedError

    def set(self, tag: ID3Tags, value: Any):
        raise NotImplementedError

    def delete(self, tag: ID3Tags):
        for key in self.keys:
            tag.delete_frame(key)

    @override
    def __repr__(self) -> str:
        return "{}({})".format(
            type(self).__name__, ", ".join(map(repr, self.keys)))


class Text(Shape):

    def __init__(self, key: str):
        self.key = key
        self.keys = (key,)

    @override
    def get(self, tag: ID3Tags) -> str:
        return tag.get_string(self.key)

    @override
    def set(self, tag: ID3Tags, value: Any):
        tag.set_string(self.key, str(value))


class Integer(Text):

    @override
    def get(self, tag: ID3Tags) -> int:
        return parse_int(super().get(tag), self.key)

    @override
    def set(self, tag: ID3Tags, value: Any):
        tag.set_string(self.key, str(int(value)))


class SplitNumber(Text):
    """``N`` or ``N/M``, like track 3 of 12"""

    @override
    def get(self, tag: ID3Tags) -> tuple[int, int]:
        text = super().get(tag)
        parts = text.split("/")
        if len(parts) > 2:
            raise ID3TagShapeError(
                f"{self.key}: expected 'N' or 'N/M', got {text!r}")
        number = parse_int(parts[0], self.key)
        if len(parts) == 1:
            return number, number
        return number, parse_int(parts[1], self.key)

    @override
    def set(self, tag: ID3Tags, value: Any):
        if isinstance(value, tuple):
            number, total = value
            text = "%d/%d" % (int(number), int(total))
        else:
            text = "%d" % int(value)
        tag.set_string(self.key, text)


class Genre(Text):
    """A genre, either as ``(NN)`` code of the standard genre list or, if
    `free_text` is set, any name.
    """

    _code = re.compile(r"\((\d+)\)")

    def __init__(self, key: str, free_text: bool = False):
        super().__init__(key)
        self.free_text = free_text

    @staticmethod
    def _name(code: int) -> str:
        try:
            return GENRES[code]
        except IndexError:
            raise ID3UnknownGenreError(
                "unknown genre code %d" % code) from None

    @override
    def get(self, tag: ID3Tags) -> str:
        text = super().get(tag)
        match = self._code.search(text)
        if match is not None:
            return self._name(int(match.group(1)))
        if not self.free_text:
            return ""
        if text.strip().isdigit():
            return self._name(int(text))
        return text

    @override
    def set(self, tag: ID3Tags, value: Any):
        name = str(value)
        if self.free_text:
            tag.set_string(self.key, name)
            return
        try:
            code = genre_code(name)
        except KeyError:
            raise ID3UnknownGenreError(
                f"{name!r} is not a known genre") from None
        tag.set_string(self.key, "(%d)" % code)


class TimestampYear(Text):
    """The year part of an ID3v2.4 timestamp"""

    @override
    def get(self, tag: ID3Tags) -> int:
        return parse_int(super().get(tag)[:4], self.key)

    @override
    def set(self, tag: ID3Tags, value: Any):
        year = "%04d" % int(value)
        try:
            rest = super().get(tag)[4:]
        except (ID3TagNotFoundError, ID3TagShapeError,
                ID3UnsupportedEncodingError, ID3OddLengthError):
            # nothing readable to keep
            rest = ""
        tag.set_string(self.key, year + rest)


class Timestamp(Text):
    """An ID3v2.4 timestamp ``yyyy[-MM[-dd[THH[:mm[:ss]]]]]``"""

    _split = re.compile(r"[-T:/.]|\s+")

    @override
    def get(self, tag: ID3Tags) -> datetime.datetime:
        text = super().get(tag).strip()
        parts = [p for p in self._split.split(text) if p][:6]
        if not parts:
            raise ID3TagShapeError(f"{self.key}: empty timestamp")
        values = [parse_int(p, self.key) for p in parts]
        # missing month and day default to the first
        values += [1, 1, 0, 0, 0][len(values) - 1:]
        try:
            return datetime.datetime(*values)
        except ValueError as e:
            raise ID3TagShapeError(f"{self.key}: {e}") from e

    @override
    def set(self, tag: ID3Tags, value: Any):
        if isinstance(value, datetime.datetime):
            text = "%04d-%02d-%02dT%02d:%02d:%02d" % (
                value.year, value.month, value.day,
                value.hour, value.minute, value.second)
        elif isinstance(value, datetime.date):
            text = "%04d-%02d-%02d" % (value.year, value.month, value.day)
        else:
            raise TypeError(f"expected a date, not {value!r}")
        tag.set_string(self.key, text)


class SplitDate(Shape):
    """A date spread over a year frame, a ``DDMM`` frame and a ``HHMM``
    frame (ID3v2.2 and 2.3).
    """

    def __init__(self, year: str, ddmm: str, hhmm: str):
        self.year, self.ddmm, self.hhmm = year, ddmm, hhmm
        self.keys = (year, ddmm, hhmm)

    @override
    def present(self, tag: ID3Tags) -> bool:
        return self.year in tag.frames

    def _pair(self, tag: ID3Tags, key: str) -> tuple[int, int] | None:
        if key not in tag.frames:
            return None
        text = tag.get_string(key).strip()
        if len(text) != 4:
            raise ID3TagShapeError(f"{key}: expected 4 digits, got {text!r}")
        return parse_int(text[:2], key), parse_int(text[2:], key)

    @override
    def get(self, tag: ID3Tags) -> datetime.datetime:
        year = parse_int(tag.get_string(self.year), self.year)
        day, month = self._pair(tag, self.ddmm) or (1, 1)
        hour, minute = self._pair(tag, self.hhmm) or (0, 0)
        try:
            return datetime.datetime(year, month, day, hour, minute)
        except ValueError as e:
            raise ID3TagShapeError(f"{self.keys}: {e}") from e

    @override
    def set(self, tag: ID3Tags, value: Any):
        if not isinstance(value, datetime.date):
            raise TypeError(f"expected a date, not {value!r}")
        tag.set_string(self.year, "%04d" % value.year)
        tag.set_string(self.ddmm, "%02d%02d" % (value.day, value.month))
        if isinstance(value, datetime.datetime):
            tag.set_string(
                self.hhmm, "%02d%02d" % (value.hour, value.minute))
        else:
            tag.delete_frame(self.hhmm)


class Comment(Text):
    """The text of the comment frame"""

    @override
    def get(self, tag: ID3Tags) -> str:
        return tag.get_frame(self.key).text

    @override
    def set(self, tag: ID3Tags, value: Any):
        cls = tag._frame_header.frames[self.key]
        tag.set_frame(cls(encoding=Encoding.LATIN1, lang="eng", desc="",
                          text=str(value)))


class Picture(Text):
    """The attached picture, as :class:`AttachedPicture`"""

    @override
    def get(self, tag: ID3Tags) -> APIC:
        return tag.get_frame(self.key)

    @override
    def set(self, tag: ID3Tags, value: Any):
        if not isinstance(value, APIC):
            raise TypeError(f"expected an AttachedPicture, not {value!r}")
        cls = tag._frame_header.frames[self.key]
        tag.set_frame(cls(encoding=Encoding.LATIN1, mime=value.mime,
                          type=value.type, desc=value.desc, data=value.data))


class UserText(Shape):
    """A user defined text frame with a fixed description"""

    def __init__(self, desc: str):
        self.desc = desc

    @override
    def present(self, tag: ID3Tags) -> bool:
        return self.desc in tag.user_frames

    @override
    def get(self, tag: ID3Tags) -> str:
        return tag.get_user_text(self.desc)

    @override
    def set(self, tag: ID3Tags, value: Any):
        tag.set_user_text(self.desc, str(value))

    @override
    def delete(self, tag: ID3Tags):
        tag.delete_user_text(self.desc)

    @override
    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.desc!r})"


FIELDS: list[tuple[str, Shape | None, Shape | None, Shape | None]] = [
    # name, ID3v2.2, ID3v2.3, ID3v2.4
    ("title", Text("TT2"), Text("TIT2"), Text("TIT2")),
    ("artist", Text("TP1"), Text("TPE1"), Text("TPE1")),
    ("album", Text("TAL"), Text("TALB"), Text("TALB")),
    ("albumartist", None, Text("TPE2"), Text("TPE2")),
    ("arranger", Text("TP4"), Text("TPE4"), Text("TPE4")),
    ("author", Text("TOL"), Text("TOLY"), Text("TOLY")),
    ("composer", Text("TCM"), Text("TCOM"), Text("TCOM")),
    ("conductor", Text("TP3"), Text("TPE3"), Text("TPE3")),
    ("copyright", Text("TCR"), Text("TCOP"), Text("TCOP")),
    ("description", Text("TT3"), Text("TIT3"), Text("TIT3")),
    ("encodedby", Text("TEN"), Text("TENC"), Text("TENC")),
    ("compilation", None, Text("TCMP"), Text("TCMP")),
    ("bpm", Integer("TBP"), Integer("TBPM"), Integer("TBPM")),
    ("year", Integer("TYE"), Integer("TYER"), TimestampYear("TDRC")),
    ("date", SplitDate("TYE", "TDA", "TIM"),
     SplitDate("TYER", "TDAT", "TIME"), Timestamp("TDRC")),
    ("tracknumber", SplitNumber("TRK"), SplitNumber("TRCK"),
     SplitNumber("TRCK")),
    ("discnumber", SplitNumber("TPA"), SplitNumber("TPOS"),
     SplitNumber("TPOS")),
    ("genre", Genre("TCO"), Genre("TCON"), Genre("TCON", free_text=True)),
    ("comment", Comment("COM"), Comment("COMM"), Comment("COMM")),
    ("picture", Picture("PIC"), Picture("APIC"), Picture("APIC")),
    ("catalognumber", UserText("CATALOGNUMBER"),
     UserText("CATALOGNUMBER"), UserText("CATALOGNUMBER")),
]
"""Every field with the shape backing it per version, None if the
version has no such field."""


def fields_for(major: int) -> dict[str, Shape | None]:
    """The field table of ID3v2.`major`"""

    column = {2: 1, 3: 2, 4: 3}[major]
    return {row[0]: row[column] for row in FIELDS}


def frames_for(major: int) -> frozenset[str]:
    """All frame IDs the field table of ID3v2.`major` interprets"""

    keys: set[str] = set()
    for shape in fields_for(major).values():
        if shape is not None:
            keys.update(shape.keys)
    return frozenset(keys)


class ID3Fields(DictMixin):
    """Dict-like access to the fields of a tag.

    ::

        tag["title"] = "Hello"
        tag["tracknumber"] = (3, 12)
        del tag["comment"]

    Keys are case-insensitive. Unknown keys raise ValueError, fields the
    tag version doesn't have raise ID3UnsupportedFieldError.
    """

    _fields: ClassVar[dict[str, Shape | None]] = {}
    _major: ClassVar[int]

    def _field(self, key: str) -> Shape:
        key = key.lower()
        if key not in self._fields:
            raise ValueError(f"{key!r} is not a valid key")
        shape = self._fields[key]
        if shape is None:
            raise ID3UnsupportedFieldError(
                "%s is not available in ID3v2.%d" % (key, self._major))
        return shape

    def __getitem__(self, key: str) -> Any:
        return self._field(key).get(self)

    def __setitem__(self, key: str, value: Any):
        self._field(key).set(self, value)

    def __delitem__(self, key: str):
        shape = self._field(key)
        if shape.present(self):
            shape.delete(self)

    def keys(self) -> list[str]:
        return [name for name, shape in self._fields.items()
                if shape is not None and shape.present(self)]

    @override
    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self.keys()

    def pprint(self) -> str:
        """Print tag key=value pairs."""

        strings = []
        for key in self.keys():
            value = self[key]
            if hasattr(value, "_pprint"):
                strings.append(f"{key}={value._pprint()}")
            else:
                strings.append(f"{key}={value!r}")
        return "\n".join(strings)

    def get_image(self) -> Image.Image:
        """Decodes the attached picture.

        Raises:
            ID3TagNotFoundError: if there is no picture
            ID3TagShapeError: if the picture isn't a JPEG or PNG image
        """

        picture = self["picture"]
        if picture.mime.lower() not in ("image/jpeg", "image/jpg",
                                        "image/png"):
            raise ID3TagShapeError(
                f"can't decode {picture.mime!r} pictures")
        try:
            image = Image.open(BytesIO(picture.data))
            image.load()
        except (OSError, Image.DecompressionBombError) as e:
            raise ID3TagShapeError(f"invalid picture data: {e}") from e
        return image

    def set_image(self, image: Image.Image):
        """Stores an image as PNG picture.

        The type and description of an existing picture are kept.
        """

        try:
            old = self["picture"]
        except ID3TagNotFoundError:
            type_, desc = PictureType.OTHER_FILE_ICON, ""
        else:
            type_, desc = old.type, old.desc

        buf = BytesIO()
        image.save(buf, format="PNG")
        self["picture"] = APIC(encoding=Encoding.LATIN1, mime="image/png",
                               type=type_, desc=desc, data=buf.getvalue())
