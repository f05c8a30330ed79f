"""
Ingest of files that a user has placed in their directory on the server.
"""
import os, shutil, logging
from typing import List, Sequence, Tuple

from . import IngestError, LocalIngestDisabled, NoUserDirectory
from .config import IngestConfig
from irepo.base import StateException
from irepo.base.config import ConfigurationException
from irepo.index.indexer import IndexingService
from irepo.models import FileSet, GenericWork

class LocalIngestService(object):
    """
    a service that turns files in a user's server-side directory into file sets attached to works.
    Each requested name may be a file or a directory; directories are ingested recursively with
    each file remembering its path relative to the user's directory.
    """

    def __init__(self, config: IngestConfig, indexer: IndexingService=None, log: logging.Logger=None):
        self.cfg = config
        self.indexer = indexer
        if not log:
            log = logging.getLogger("irepo.ingest")
        self.log = log

    def load_parent(self, id: str) -> GenericWork:
        """
        retrieve the existing work with the given identifier from the index so that files
        can be attached to it
        :raises IngestError:  if no work with that identifier is in the index
        :raises IndexServerError:  if the search index is unavailable
        """
        if not self.indexer:
            raise StateException("LocalIngestService: an indexer is required to find works")
        doc = self.indexer.fetch(id)
        if not doc:
            raise IngestError("Parent work not found: "+id)
        if GenericWork.__name__ not in doc.get('has_model_ssim', []):
            raise IngestError("Requested parent is not a work: "+id)
        return GenericWork.from_index_doc(doc)

    def ingest(self, user_dir: str, names: Sequence[str], depositor: str,
               parent: GenericWork=None) -> List[FileSet]:
        """
        ingest the named files from the user's directory.
        :param str   user_dir:  the user's directory on the server
        :param list     names:  the names of the files or directories to ingest, relative to
                                ``user_dir``
        :param str  depositor:  the identifier of the user depositing the files
        :param GenericWork parent:  the work to attach all the files to (see :py:meth:`load_parent`);
                                if not provided, a new work will be created for each file.
        :return:  the file sets created, in the order requested
        :raises LocalIngestDisabled:  if local ingest is not enabled
        :raises NoUserDirectory:  if the user does not have a directory on the server
        :raises IngestError:  if any of the requested names cannot be ingested; in this case,
                              no files are ingested.
        """
        if not self.cfg.enable_local_ingest:
            raise LocalIngestDisabled()
        if not user_dir or not os.path.isdir(user_dir):
            raise NoUserDirectory()
        if not self.cfg.storage_dir:
            raise ConfigurationException("Missing required ingest config parameter: storage_dir")

        files = self._gather(user_dir, names)

        filesets = []
        works = []
        stored = []
        try:
            for path, relpath in files:
                fs = FileSet(label=os.path.basename(path), depositor=depositor, relative_path=relpath)
                fs.stored_path = self._store(path, fs)
                stored.append((path, fs.stored_path))

                work = parent
                if not work:
                    work = GenericWork(title=fs.label, depositor=depositor)
                work.add_file_set(fs)
                if work not in works:
                    works.append(work)
                filesets.append(fs)
                self.log.info("Ingested %s as file set %s (work %s)", relpath, fs.id, work.id)

            if self.cfg.index_on_ingest and self.indexer and filesets:
                self.indexer.index(filesets + works)

        except Exception:
            self.log.error("Ingest failed; restoring %d stored file(s)", len(stored))
            self._unstore(stored)
            raise

        return filesets

    def _gather(self, user_dir, names) -> List[Tuple[str, str]]:
        base = os.path.realpath(user_dir)
        out = []
        seen = set()

        def add(path):
            # overlapping names (e.g. a directory and a file within it) yield each file once
            if path not in seen:
                seen.add(path)
                out.append((path, os.path.relpath(path, base)))

        for name in names:
            path = os.path.realpath(os.path.join(base, name))
            if path != base and not path.startswith(base + os.sep):
                raise IngestError("Requested file is outside of user directory: "+name)
            if path == base:
                raise IngestError("Cannot ingest entire user directory")
            if not os.path.exists(path):
                raise IngestError("Requested file not found in user directory: "+name)

            if os.path.isdir(path):
                for dir, subdirs, fnames in os.walk(path):
                    subdirs.sort()
                    for f in sorted(fnames):
                        add(os.path.join(dir, f))
            else:
                add(path)

        return out

    def _store(self, path, fileset) -> str:
        destdir = os.path.join(self.cfg.storage_dir, fileset.id)
        dest = os.path.join(destdir, fileset.label)
        try:
            os.makedirs(destdir, exist_ok=True)
            if self.cfg.move_files:
                shutil.move(path, dest)
            else:
                shutil.copy2(path, dest)
        except OSError as ex:
            raise IngestError("Unable to store %s: %s" % (fileset.relative_path, str(ex)), ex)
        return dest

    def _unstore(self, stored):
        for path, dest in reversed(stored):
            try:
                if self.cfg.move_files:
                    shutil.move(dest, path)
                else:
                    os.remove(dest)
                os.rmdir(os.path.dirname(dest))
            except OSError as ex:
                self.log.error("Unable to restore %s from %s: %s", path, dest, str(ex))
