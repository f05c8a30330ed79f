import os, pdb, logging, tempfile, shutil
import unittest as test
from unittest import mock

from irepo.ingest import (IngestConfig, LocalIngestService, IngestError, LocalIngestDisabled,
                          NoUserDirectory)
from irepo.index.indexer import IndexingService
from irepo.models import GenericWork
from irepo.index import IndexServerError
from irepo.base import StateException
from irepo.base.config import ConfigurationException

def touch(path, content="data"):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w') as fd:
        fd.write(content)

class TestLocalIngestService(test.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory(prefix="_test_ingest.")
        self.userdir = os.path.join(self.tmpdir.name, "upload")
        self.storedir = os.path.join(self.tmpdir.name, "store")
        os.mkdir(self.storedir)

        touch(os.path.join(self.userdir, "world.png"))
        touch(os.path.join(self.userdir, "image.jpg"))
        touch(os.path.join(self.userdir, "import", "metadata", "dublin_core_rdf_descMetadata.nt"))
        touch(os.path.join(self.userdir, "import", "files", "icons.zip"))
        touch(os.path.join(self.userdir, "import", "files", "Example.ogg"))

        self.cfg = IngestConfig(enable_local_ingest=True, storage_dir=self.storedir)
        self.solr = mock.Mock()
        self.svc = LocalIngestService(self.cfg, IndexingService(self.solr))

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_ingest_files(self):
        filesets = self.svc.ingest(self.userdir, ["world.png", "image.jpg"], "gurn")
        self.assertEqual([f.label for f in filesets], ["world.png", "image.jpg"])

        # moved out of the user directory and into storage
        self.assertFalse(os.path.exists(os.path.join(self.userdir, "world.png")))
        self.assertFalse(os.path.exists(os.path.join(self.userdir, "image.jpg")))
        for fs in filesets:
            self.assertTrue(os.path.isfile(fs.stored_path))
            self.assertTrue(fs.stored_path.startswith(os.path.join(self.storedir, fs.id)))
            self.assertEqual(fs.depositor, "gurn")

        # a separate work was created for each file
        self.assertEqual(len(filesets[0].work_ids), 1)
        self.assertNotEqual(filesets[0].work_ids, filesets[1].work_ids)

        # files and works were indexed
        docs = self.solr.add.call_args[0][0]
        self.assertEqual(len(docs), 4)
        models = sorted(d['has_model_ssim'][0] for d in docs)
        self.assertEqual(models, ["FileSet", "FileSet", "GenericWork", "GenericWork"])

    def test_ingest_directory(self):
        filesets = self.svc.ingest(self.userdir, ["world.png", "import"], "gurn")
        self.assertEqual(len(filesets), 4)
        paths = dict((f.label, f.relative_path) for f in filesets)
        self.assertEqual(paths["world.png"], "world.png")
        self.assertEqual(paths["icons.zip"], os.path.join("import", "files", "icons.zip"))
        self.assertEqual(paths["Example.ogg"], os.path.join("import", "files", "Example.ogg"))
        self.assertEqual(paths["dublin_core_rdf_descMetadata.nt"],
                         os.path.join("import", "metadata", "dublin_core_rdf_descMetadata.nt"))
        self.assertEqual(filesets[0].label, "world.png")
        self.assertFalse(os.path.exists(os.path.join(self.userdir, "import", "files", "icons.zip")))

    def test_ingest_to_parent(self):
        work = GenericWork("w1", "A Study", "gurn")
        filesets = self.svc.ingest(self.userdir, ["world.png", "image.jpg"], "gurn", work)
        self.assertEqual(work.file_set_ids, [f.id for f in filesets])
        for fs in filesets:
            self.assertEqual(fs.work_ids, ["w1"])

        docs = self.solr.add.call_args[0][0]
        self.assertEqual(len(docs), 3)
        self.assertEqual(docs[-1]['id'], "w1")
        self.assertEqual(docs[-1]['file_set_ids_ssim'], work.file_set_ids)

    def test_copy(self):
        svc = LocalIngestService(self.cfg._replace(move_files=False, index_on_ingest=False),
                                 IndexingService(self.solr))
        filesets = svc.ingest(self.userdir, ["world.png"], "gurn")
        self.assertTrue(os.path.exists(os.path.join(self.userdir, "world.png")))
        self.assertTrue(os.path.exists(filesets[0].stored_path))
        self.solr.add.assert_not_called()

    def test_disabled(self):
        svc = LocalIngestService(IngestConfig(storage_dir=self.storedir))
        with self.assertRaises(LocalIngestDisabled):
            svc.ingest(self.userdir, ["world.png"], "gurn")
        self.assertTrue(os.path.exists(os.path.join(self.userdir, "world.png")))

    def test_no_user_dir(self):
        with self.assertRaises(NoUserDirectory) as cm:
            self.svc.ingest(None, ["world.png"], "gurn")
        self.assertEqual(str(cm.exception), "Your account is not configured for importing files "
                                            "from a user-directory on the server.")
        with self.assertRaises(NoUserDirectory):
            self.svc.ingest(os.path.join(self.tmpdir.name, "goober"), ["world.png"], "gurn")

    def test_no_storage(self):
        svc = LocalIngestService(IngestConfig(enable_local_ingest=True))
        with self.assertRaises(ConfigurationException):
            svc.ingest(self.userdir, ["world.png"], "gurn")

    def test_bad_names(self):
        with self.assertRaises(IngestError):
            self.svc.ingest(self.userdir, ["world.png", "goober.txt"], "gurn")
        # nothing was ingested
        self.assertTrue(os.path.exists(os.path.join(self.userdir, "world.png")))

        with self.assertRaises(IngestError):
            self.svc.ingest(self.userdir, ["../store"], "gurn")
        with self.assertRaises(IngestError):
            self.svc.ingest(self.userdir, ["."], "gurn")
        self.solr.add.assert_not_called()

    def test_overlapping_names(self):
        filesets = self.svc.ingest(self.userdir, ["world.png", "import", "import/files/icons.zip",
                                                  "world.png"], "gurn")
        self.assertEqual(len(filesets), 5)
        paths = [f.relative_path for f in filesets]
        self.assertEqual(len(set(paths)), 5)
        self.assertEqual(paths[0], "world.png")

    def test_store_failure_restores(self):
        real_store = self.svc._store
        def store(path, fs):
            if fs.label == "icons.zip":
                raise IngestError("Unable to store "+fs.relative_path)
            return real_store(path, fs)

        with mock.patch.object(self.svc, '_store', side_effect=store):
            with self.assertRaises(IngestError):
                self.svc.ingest(self.userdir, ["world.png", "image.jpg", "import"], "gurn")

        self.assertTrue(os.path.isfile(os.path.join(self.userdir, "world.png")))
        self.assertTrue(os.path.isfile(os.path.join(self.userdir, "image.jpg")))
        self.assertTrue(os.path.isfile(os.path.join(self.userdir, "import", "files", "Example.ogg")))
        self.assertEqual(os.listdir(self.storedir), [])
        self.solr.add.assert_not_called()

    def test_index_failure_restores(self):
        self.solr.add.side_effect = IndexServerError("update", 503, "Service Unavailable")
        with self.assertRaises(IndexServerError):
            self.svc.ingest(self.userdir, ["world.png"], "gurn")
        self.assertTrue(os.path.isfile(os.path.join(self.userdir, "world.png")))
        self.assertEqual(os.listdir(self.storedir), [])

    def test_load_parent(self):
        self.solr.select.return_value = { "response": { "docs": [
            { "id": "w1", "has_model_ssim": ["GenericWork"], "title_tesim": ["A Study"],
              "member_of_collection_ids_ssim": ["colA"], "file_set_ids_ssim": ["f0"] }
        ]}}
        work = self.svc.load_parent("w1")
        self.assertEqual(work.id, "w1")
        self.assertEqual(work.title, "A Study")
        self.assertEqual(work.member_of_collection_ids, ["colA"])
        self.assertEqual(work.file_set_ids, ["f0"])

        self.solr.select.return_value = { "response": { "docs": [] } }
        with self.assertRaises(IngestError):
            self.svc.load_parent("w9")

        self.solr.select.return_value = { "response": { "docs": [
            { "id": "colA", "has_model_ssim": ["Collection"] } ]}}
        with self.assertRaises(IngestError):
            self.svc.load_parent("colA")

        with self.assertRaises(StateException):
            LocalIngestService(self.cfg).load_parent("w1")

class TestIngestConfig(test.TestCase):

    def test_defaults(self):
        cfg = IngestConfig()
        self.assertFalse(cfg.enable_local_ingest)
        self.assertIsNone(cfg.storage_dir)
        self.assertTrue(cfg.move_files)
        self.assertTrue(cfg.index_on_ingest)

    def test_from_config(self):
        cfg = IngestConfig.from_config({ "enable_local_ingest": True, "storage_dir": "/tmp/store" })
        self.assertTrue(cfg.enable_local_ingest)
        self.assertEqual(cfg.storage_dir, "/tmp/store")
        self.assertEqual(IngestConfig.from_config(None), IngestConfig())

        with self.assertRaises(ConfigurationException):
            IngestConfig.from_config({ "enable_local_ingest": True, "goober": 1 })


if __name__ == '__main__':
    test.main()
