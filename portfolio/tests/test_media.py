import os
import tempfile
import unittest

from portfolio.errors import NotFoundError, ValidationError
from portfolio.files import InMemoryFileStorage, LocalFileStorage
from portfolio.media import MediaLibrary, make_stored_name, parse_tags
from portfolio.store import InMemoryStore, JsonFileStore


class TagParsingTests(unittest.TestCase):
    def test_split_and_trim(self):
        self.assertEqual(parse_tags(" art, design ,web"), ["art", "design", "web"])

    def test_empty_input(self):
        self.assertEqual(parse_tags(None), [])
        self.assertEqual(parse_tags(""), [])
        self.assertEqual(parse_tags(" , "), ["", ""])

    def test_empty_fragments_are_kept(self):
        self.assertEqual(parse_tags("a,,b"), ["a", "", "b"])
        self.assertEqual(parse_tags("a, "), ["a", ""])


class StoredNameTests(unittest.TestCase):
    def test_keeps_original_basename(self):
        name = make_stored_name("photo.jpg")
        self.assertTrue(name.endswith("-photo.jpg"))
        millis = name.split("-", 1)[0]
        self.assertTrue(millis.isdigit())

    def test_strips_directories(self):
        self.assertTrue(make_stored_name("../../etc/passwd").endswith("-passwd"))
        self.assertTrue(make_stored_name("C:\\temp\\cv.pdf").endswith("-cv.pdf"))

    def test_missing_name_falls_back(self):
        self.assertTrue(make_stored_name(None).endswith("-upload"))
        self.assertTrue(make_stored_name("..").endswith("-upload"))

    def test_same_original_name_never_collides(self):
        names = {make_stored_name("a.png") for _ in range(50)}
        self.assertEqual(len(names), 50)


class MediaLibraryTests(unittest.TestCase):
    def setUp(self):
        self.files = InMemoryFileStorage()
        self.metadata = InMemoryStore(document={})
        self.media = MediaLibrary(files=self.files, metadata=self.metadata)

    def test_upload_writes_file_and_metadata(self):
        name = self.media.upload("cat.png", b"meow", tags="pets, cats", link="https://x.test")
        self.assertEqual(self.files.read(name), b"meow")
        self.assertEqual(
            self.metadata.load()[name],
            {"tags": ["pets", "cats"], "link": "https://x.test"},
        )

    def test_upload_without_tags_or_link(self):
        name = self.media.upload("cat.png", b"meow")
        self.assertEqual(self.metadata.load()[name], {"tags": [], "link": ""})

    def test_upload_without_file_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.media.upload(None, None)
        self.assertEqual(self.files.files, {})

    def test_delete_removes_file_and_entry(self):
        keep = self.media.upload("a.png", b"a")
        gone = self.media.upload("b.png", b"b")
        self.media.delete(gone)
        self.assertNotIn(gone, self.files.files)
        self.assertEqual(list(self.metadata.load()), [keep])

    def test_delete_missing_leaves_metadata_unchanged(self):
        self.metadata.save({"ghost.png": {"tags": ["x"], "link": ""}})
        with self.assertRaises(NotFoundError):
            self.media.delete("ghost.png")
        self.assertEqual(self.metadata.load(), {"ghost.png": {"tags": ["x"], "link": ""}})

    def test_reserved_and_unsafe_names_are_not_found(self):
        for name in ("metadata.json", "profile.json", "../x", ".."):
            with self.assertRaises(NotFoundError):
                self.media.delete(name)
            with self.assertRaises(NotFoundError):
                self.media.read(name)

    def test_entries_are_typed(self):
        name = self.media.upload("a.png", b"a", tags="one")
        entries = self.media.entries()
        self.assertEqual(entries[name].tags, ["one"])
        self.assertEqual(entries[name].link, "")


class LocalMediaLibraryTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        root = self.tmp.name
        self.metadata = JsonFileStore(os.path.join(root, "metadata.json"), initialize=True)
        self.profile = JsonFileStore(os.path.join(root, "profile.json"))
        self.profile.save({"name": "someone"})
        self.media = MediaLibrary(files=LocalFileStorage(root), metadata=self.metadata)

    def tearDown(self):
        self.tmp.cleanup()

    def test_upload_exists_on_disk_and_in_metadata(self):
        name = self.media.upload("cv.pdf", b"%PDF", tags="work")
        self.assertTrue(os.path.isfile(os.path.join(self.tmp.name, name)))
        self.assertIn(name, self.metadata.load())

    def test_listing_excludes_store_documents(self):
        first = self.media.upload("a.png", b"a")
        second = self.media.upload("b.png", b"b")
        self.assertEqual(sorted(self.media.list_files()), sorted([first, second]))

    def test_listing_empty_directory(self):
        self.assertEqual(self.media.list_files(), [])

    def test_delete_roundtrip_on_disk(self):
        name = self.media.upload("a.png", b"a")
        self.media.delete(name)
        self.assertFalse(os.path.exists(os.path.join(self.tmp.name, name)))
        self.assertEqual(self.metadata.load(), {})
        with self.assertRaises(NotFoundError):
            self.media.delete(name)


if __name__ == "__main__":
    unittest.main()
