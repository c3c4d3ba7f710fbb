import datetime
from io import BytesIO

from PIL import Image

from tagcodec.id3 import ID3v22, ID3v23, ID3v24, AttachedPicture, \
    PictureType, Encoding, FIELDS, ID3UnsupportedFieldError, \
    ID3TagShapeError, ID3NumberError, ID3UnknownGenreError, \
    ID3TagNotFoundError
from tagcodec.id3._fields import fields_for, frames_for
from tests import TestCase


PNG_DATA = b"\x89PNG\r\n\x1a\n" + b"\x00\x01\x02" * 10


class TFieldTables(TestCase):

    def test_all_versions(self):
        names = [row[0] for row in FIELDS]
        for major in (2, 3, 4):
            self.assertEqual(list(fields_for(major)), names)

    def test_unsupported_v22(self):
        table = fields_for(2)
        self.assertTrue(table["albumartist"] is None)
        self.assertTrue(table["compilation"] is None)
        self.assertTrue(fields_for(3)["albumartist"] is not None)

    def test_frames_for(self):
        self.assertTrue("TT2" in frames_for(2))
        self.assertTrue("TDAT" in frames_for(3))
        self.assertTrue("TDRC" in frames_for(4))
        self.assertFalse("TYER" in frames_for(4))


class TFieldAccess(TestCase):

    def setUp(self):
        self.tag = ID3v23()

    def test_text(self):
        self.tag["title"] = "Hello"
        self.assertEqual(self.tag.get_bytes("TIT2"), b"\x00Hello")
        self.assertEqual(self.tag["title"], "Hello")
        self.assertEqual(self.tag["TITLE"], "Hello")

    def test_text_keys(self):
        expected = {
            "artist": "TPE1", "album": "TALB", "albumartist": "TPE2",
            "arranger": "TPE4", "author": "TOLY", "composer": "TCOM",
            "conductor": "TPE3", "copyright": "TCOP",
            "description": "TIT3", "encodedby": "TENC",
            "compilation": "TCMP",
        }
        for name, key in expected.items():
            self.tag[name] = name
            self.assertEqual(self.tag.get_string(key), name)

    def test_invalid_key(self):
        self.assertRaises(ValueError, self.tag.__getitem__, "nope")
        self.assertRaises(ValueError, self.tag.__setitem__, "nope", "x")
        self.assertRaises(ValueError, self.tag.__delitem__, "nope")

    def test_missing(self):
        self.assertRaises(ID3TagNotFoundError, self.tag.__getitem__, "title")
        self.assertEqual(self.tag.get("title"), None)

    def test_keys(self):
        self.assertEqual(self.tag.keys(), [])
        self.tag["catalognumber"] = "ABC-1"
        self.tag["title"] = "x"
        self.assertEqual(self.tag.keys(), ["title", "catalognumber"])
        self.assertTrue("title" in self.tag)
        self.assertFalse("album" in self.tag)
        self.assertFalse("nope" in self.tag)
        self.assertEqual(len(self.tag), 2)

    def test_delete(self):
        self.tag["title"] = "x"
        del self.tag["title"]
        self.assertFalse("TIT2" in self.tag.frames)
        del self.tag["title"]

    def test_update(self):
        self.tag.update({"title": "a", "album": "b"})
        self.assertEqual(self.tag["album"], "b")
        self.assertEqual(self.tag.pprint(), "title='a'\nalbum='b'")

    def test_pprint_picture(self):
        self.tag["picture"] = AttachedPicture(
            mime="image/png", desc="x", data=b"123")
        self.assertEqual(self.tag.pprint(),
                         "picture=cover front, x (image/png, 3 bytes)")

    def test_bpm(self):
        self.tag["bpm"] = 120
        self.assertEqual(self.tag.get_string("TBPM"), "120")
        self.assertEqual(self.tag["bpm"], 120)
        self.tag.set_string("TBPM", "fast")
        self.assertRaises(ID3NumberError, self.tag.__getitem__, "bpm")


class TSplitNumber(TestCase):

    def setUp(self):
        self.tag = ID3v24()

    def test_single(self):
        self.tag.set_string("TRCK", "5")
        self.assertEqual(self.tag["tracknumber"], (5, 5))

    def test_pair(self):
        self.tag.set_string("TRCK", "3/12")
        self.assertEqual(self.tag["tracknumber"], (3, 12))

    def test_too_many_parts(self):
        self.tag.set_string("TRCK", "1/2/3")
        self.assertRaises(ID3TagShapeError, self.tag.__getitem__,
                          "tracknumber")

    def test_not_a_number(self):
        self.tag.set_string("TPOS", "x/2")
        self.assertRaises(ID3NumberError, self.tag.__getitem__,
                          "discnumber")
        self.tag.set_string("TPOS", "1/")
        self.assertRaises(ID3NumberError, self.tag.__getitem__,
                          "discnumber")

    def test_ascii_digits_only(self):
        self.tag.set_string("TRCK", "３/１２")
        self.assertRaises(ID3NumberError, self.tag.__getitem__,
                          "tracknumber")
        self.tag.set_string("TRCK", " 3 / 12 ")
        self.assertEqual(self.tag["tracknumber"], (3, 12))

    def test_set(self):
        self.tag["tracknumber"] = (3, 12)
        self.assertEqual(self.tag.get_string("TRCK"), "3/12")
        self.tag["discnumber"] = 2
        self.assertEqual(self.tag.get_string("TPOS"), "2")


class TUnsupported(TestCase):

    def test_albumartist_v22(self):
        tag = ID3v22()
        self.assertRaises(ID3UnsupportedFieldError, tag.__getitem__,
                          "albumartist")
        self.assertRaises(ID3UnsupportedFieldError, tag.__setitem__,
                          "albumartist", "x")
        self.assertRaises(ID3UnsupportedFieldError, tag.__delitem__,
                          "albumartist")
        self.assertFalse("albumartist" in tag)
        self.assertTrue(issubclass(ID3UnsupportedFieldError,
                                   NotImplementedError))

    def test_compilation_v22(self):
        self.assertRaises(ID3UnsupportedFieldError, ID3v22().__setitem__,
                          "compilation", "1")


class TGenre(TestCase):

    def test_v23_code(self):
        tag = ID3v23()
        tag.set_string("TCON", "(17)")
        self.assertEqual(tag["genre"], "Rock")
        tag.set_string("TCON", "(17)Rock")
        self.assertEqual(tag["genre"], "Rock")

    def test_v23_no_code(self):
        tag = ID3v23()
        tag.set_string("TCON", "Rock")
        self.assertEqual(tag["genre"], "")

    def test_v23_set(self):
        tag = ID3v23()
        tag["genre"] = "rock"
        self.assertEqual(tag.get_string("TCON"), "(17)")
        self.assertRaises(ID3UnknownGenreError, tag.__setitem__, "genre",
                          "Synthwave")

    def test_v22(self):
        tag = ID3v22()
        tag["genre"] = "Blues"
        self.assertEqual(tag.get_string("TCO"), "(0)")
        self.assertEqual(tag["genre"], "Blues")

    def test_unknown_code(self):
        tag = ID3v23()
        tag.set_string("TCON", "(250)")
        self.assertRaises(ID3UnknownGenreError, tag.__getitem__, "genre")

    def test_v24(self):
        tag = ID3v24()
        tag.set_string("TCON", "17")
        self.assertEqual(tag["genre"], "Rock")
        tag.set_string("TCON", "(20)")
        self.assertEqual(tag["genre"], "Alternative")
        tag.set_string("TCON", "Synthwave")
        self.assertEqual(tag["genre"], "Synthwave")
        tag["genre"] = "Hard Rock"
        self.assertEqual(tag.get_string("TCON"), "Hard Rock")


class TDate(TestCase):

    def test_v23_get(self):
        tag = ID3v23()
        tag.set_string("TYER", "2001")
        tag.set_string("TDAT", "0605")
        tag.set_string("TIME", "1230")
        self.assertEqual(tag["date"], datetime.datetime(2001, 5, 6, 12, 30))
        self.assertEqual(tag["year"], 2001)

    def test_v23_year_only(self):
        tag = ID3v23()
        tag["year"] = 1999
        self.assertEqual(tag.get_string("TYER"), "1999")
        self.assertEqual(tag["date"], datetime.datetime(1999, 1, 1))

    def test_v23_set(self):
        tag = ID3v23()
        tag["date"] = datetime.datetime(1999, 12, 31, 23, 59)
        self.assertEqual(tag.get_string("TYER"), "1999")
        self.assertEqual(tag.get_string("TDAT"), "3112")
        self.assertEqual(tag.get_string("TIME"), "2359")

        tag["date"] = datetime.date(2000, 1, 2)
        self.assertEqual(tag.get_string("TDAT"), "0201")
        self.assertFalse("TIME" in tag.frames)

    def test_v23_delete(self):
        tag = ID3v23()
        tag["date"] = datetime.datetime(1999, 12, 31, 23, 59)
        del tag["date"]
        self.assertEqual(tag.frame_names(), [])

    def test_v23_bad_ddmm(self):
        tag = ID3v23()
        tag.set_string("TYER", "2001")
        tag.set_string("TDAT", "3302")
        self.assertRaises(ID3TagShapeError, tag.__getitem__, "date")
        tag.set_string("TDAT", "12")
        self.assertRaises(ID3TagShapeError, tag.__getitem__, "date")

    def test_v22(self):
        tag = ID3v22()
        tag["date"] = datetime.datetime(2010, 7, 4, 8, 5)
        self.assertEqual(tag.get_string("TYE"), "2010")
        self.assertEqual(tag.get_string("TDA"), "0407")
        self.assertEqual(tag.get_string("TIM"), "0805")
        self.assertEqual(tag["date"], datetime.datetime(2010, 7, 4, 8, 5))

    def test_v24(self):
        tag = ID3v24()
        tag.set_string("TDRC", "2001-05-06T12:30:15")
        self.assertEqual(tag["date"],
                         datetime.datetime(2001, 5, 6, 12, 30, 15))
        tag.set_string("TDRC", "2001")
        self.assertEqual(tag["date"], datetime.datetime(2001, 1, 1))
        tag.set_string("TDRC", "2001-05")
        self.assertEqual(tag["date"], datetime.datetime(2001, 5, 1))

    def test_v24_set(self):
        tag = ID3v24()
        tag["date"] = datetime.datetime(2001, 5, 6, 12, 30, 15)
        self.assertEqual(tag.get_string("TDRC"), "2001-05-06T12:30:15")
        tag["date"] = datetime.date(2001, 5, 6)
        self.assertEqual(tag.get_string("TDRC"), "2001-05-06")
        self.assertRaises(TypeError, tag.__setitem__, "date", "2001")

    def test_v24_year(self):
        tag = ID3v24()
        tag.set_string("TDRC", "2001-05-06")
        self.assertEqual(tag["year"], 2001)
        tag["year"] = 2003
        self.assertEqual(tag.get_string("TDRC"), "2003-05-06")
        del tag["year"]
        tag["year"] = 1980
        self.assertEqual(tag.get_string("TDRC"), "1980")

    def test_v24_year_unreadable_frame(self):
        tag = ID3v24()
        tag.set_bytes("TDRC", b"\x00")
        tag["year"] = 2003
        self.assertEqual(tag.get_string("TDRC"), "2003")

        tag.set_bytes("TDRC", b"\x01\xff\xfe2")
        tag["year"] = 2004
        self.assertEqual(tag.get_string("TDRC"), "2004")

    def test_v24_set_early_year(self):
        tag = ID3v24()
        tag["date"] = datetime.date(999, 1, 2)
        self.assertEqual(tag.get_string("TDRC"), "0999-01-02")
        tag["date"] = datetime.datetime(5, 1, 2, 3, 4, 5)
        self.assertEqual(tag.get_string("TDRC"), "0005-01-02T03:04:05")
        self.assertEqual(tag["year"], 5)

    def test_v24_bad(self):
        tag = ID3v24()
        tag.set_string("TDRC", "2001-13-01")
        self.assertRaises(ID3TagShapeError, tag.__getitem__, "date")
        tag.set_string("TDRC", "")
        self.assertRaises(ID3TagShapeError, tag.__getitem__, "date")


class TComment(TestCase):

    def test_v23(self):
        tag = ID3v23()
        tag["comment"] = "nice"
        self.assertEqual(tag.get_bytes("COMM"), b"\x00eng\x00nice")
        self.assertEqual(tag["comment"], "nice")

    def test_v22(self):
        tag = ID3v22()
        tag["comment"] = "nice"
        self.assertEqual(tag.get_bytes("COM"), b"\x00eng\x00nice")
        self.assertEqual(tag["comment"], "nice")

    def test_read_utf16(self):
        tag = ID3v24()
        tag.set_bytes(
            "COMM", b"\x01deu\xff\xfed\x00\x00\x00\xff\xfeh\x00i\x00")
        self.assertEqual(tag["comment"], "hi")


class TUserText(TestCase):

    def test_catalognumber(self):
        for cls in [ID3v22, ID3v23, ID3v24]:
            tag = cls()
            tag["catalognumber"] = "ABC-1"
            self.assertEqual(tag.user_frames["CATALOGNUMBER"],
                             b"\x00CATALOGNUMBER\x00ABC-1")
            self.assertEqual(tag["catalognumber"], "ABC-1")
            del tag["catalognumber"]
            self.assertEqual(tag.user_frames.keys(), [])

    def test_user_int(self):
        tag = ID3v23()
        tag.set_user_text("DISCS", " 12")
        self.assertEqual(tag.get_user_int("DISCS"), 12)
        tag.set_user_text("DISCS", "many")
        self.assertRaises(ID3NumberError, tag.get_user_int, "DISCS")
        tag.set_user_text("DISCS", "１２")
        self.assertRaises(ID3NumberError, tag.get_user_int, "DISCS")

    def test_delete(self):
        tag = ID3v23()
        tag.set_user_text("FOO", "bar")
        tag.delete_user_text("FOO")
        tag.delete_user_text("FOO")
        self.assertRaises(ID3TagNotFoundError, tag.get_user_text, "FOO")


class TPicture(TestCase):

    def _roundtrip(self, cls):
        tag = cls()
        tag["picture"] = AttachedPicture(
            mime="image/png", type=PictureType.COVER_FRONT, desc="",
            data=PNG_DATA)
        out = BytesIO()
        tag.save(out)
        return cls(BytesIO(out.getvalue()))

    def test_roundtrip(self):
        for cls in [ID3v22, ID3v23, ID3v24]:
            tag = self._roundtrip(cls)
            pic = tag["picture"]
            self.assertEqual(pic.mime, "image/png")
            self.assertEqual(pic.type, PictureType.COVER_FRONT)
            self.assertEqual(pic.desc, "")
            self.assertEqual(pic.data, PNG_DATA)
            self.assertTrue(isinstance(pic, AttachedPicture))

    def test_raw_layout(self):
        tag = self._roundtrip(ID3v23)
        self.assertEqual(tag.get_bytes("APIC"),
                         b"\x00image/png\x00\x03\x00" + PNG_DATA)
        tag = self._roundtrip(ID3v22)
        self.assertEqual(tag.get_bytes("PIC"), b"\x00PNG\x03\x00" + PNG_DATA)

    def test_encoding_forced(self):
        tag = ID3v24()
        tag["picture"] = AttachedPicture(
            encoding=Encoding.UTF16, mime="image/jpeg", desc="d", data=b"x")
        self.assertEqual(tag.get_bytes("APIC"),
                         b"\x00image/jpeg\x00\x03d\x00x")

    def test_not_a_picture(self):
        self.assertRaises(TypeError, ID3v24().__setitem__, "picture", b"x")

    def test_delete(self):
        tag = self._roundtrip(ID3v24)
        del tag["picture"]
        self.assertEqual(tag.frame_names(), [])


class TImage(TestCase):

    def test_set_get(self):
        tag = ID3v23()
        tag.set_image(Image.new("RGB", (4, 4), "red"))
        pic = tag["picture"]
        self.assertEqual(pic.mime, "image/png")
        self.assertEqual(pic.type, PictureType.OTHER_FILE_ICON)
        self.assertEqual(pic.desc, "")

        image = tag.get_image()
        self.assertEqual(image.size, (4, 4))
        self.assertEqual(image.convert("RGB").getpixel((0, 0)), (255, 0, 0))

    def test_keeps_type_and_desc(self):
        tag = ID3v24()
        tag["picture"] = AttachedPicture(
            mime="image/jpeg", type=PictureType.COVER_BACK, desc="back",
            data=b"x")
        tag.set_image(Image.new("L", (2, 2)))
        pic = tag["picture"]
        self.assertEqual(pic.type, PictureType.COVER_BACK)
        self.assertEqual(pic.desc, "back")
        self.assertEqual(pic.mime, "image/png")

    def test_jpeg(self):
        buf = BytesIO()
        Image.new("RGB", (3, 2), "blue").save(buf, format="JPEG")
        tag = ID3v22()
        tag["picture"] = AttachedPicture(mime="image/jpeg",
                                         data=buf.getvalue())
        self.assertEqual(tag.get_image().size, (3, 2))

    def test_unsupported_mime(self):
        tag = ID3v24()
        tag["picture"] = AttachedPicture(mime="image/gif", data=b"GIF89a")
        self.assertRaises(ID3TagShapeError, tag.get_image)

    def test_broken_data(self):
        tag = ID3v24()
        tag["picture"] = AttachedPicture(mime="image/png", data=b"nope")
        self.assertRaises(ID3TagShapeError, tag.get_image)

    def test_missing(self):
        self.assertRaises(ID3TagNotFoundError, ID3v24().get_image)
