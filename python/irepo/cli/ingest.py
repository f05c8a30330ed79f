"""
CLI command that ingests files from a user's directory on the server
"""
import logging, argparse, sys

from irepo.utils.cli import CommandFailure
from irepo.base.config import ConfigurationException
from irepo.index import IndexServiceException, MalformedResponse
from irepo.index.solr import create_solr_client
from irepo.index.indexer import IndexingService
from irepo.ingest import IngestConfig, LocalIngestService, IngestError

default_name = "ingest"
help = "ingest files from a user's directory on the server"
description = """
  Ingest the named files or directories from a user's server-side directory.  Each file becomes a
  file set attached either to a given work (via --parent-id) or to a new work created for it.
  Local ingest must be enabled via the ingest.enable_local_ingest configuration parameter.
"""

def load_into(subparser, current_dests=None, as_cmd=None):
    """
    load this command into a CLI by defining the command's arguments and options
    """
    p = subparser
    p.description = description
    p.add_argument("names", metavar="NAME", type=str, nargs="+",
                   help="a file or directory to ingest, relative to the user directory")
    p.add_argument("-d", "--user-dir", metavar="DIR", type=str, dest="userdir",
                   help="the user's directory on the server")
    p.add_argument("-u", "--depositor", metavar="USERID", type=str, dest="depositor", required=True,
                   help="the identifier of the user depositing the files")
    p.add_argument("-p", "--parent-id", metavar="ID", type=str, dest="parentid",
                   help="attach all files to the existing work with this identifier")
    p.add_argument("-I", "--no-index", action="store_true", dest="noindex",
                   help="do not send the new entities to the search index")
    return None

def execute(args, config=None, log=None):
    """
    execute this command: ingest the requested files
    """
    cmd = default_name
    if not log:
        log = logging.getLogger(cmd)
    if not config:
        config = {}

    if isinstance(args, list):
        p = argparse.ArgumentParser()
        load_into(p)
        args = p.parse_args(args)

    icfg = IngestConfig.from_config(config.get('ingest'))
    if args.noindex:
        icfg = icfg._replace(index_on_ingest=False)

    # the index is also needed to find an existing parent work
    indexer = None
    if icfg.index_on_ingest or args.parentid:
        try:
            indexer = IndexingService(create_solr_client(config.get('solr')), log)
        except ConfigurationException as ex:
            raise CommandFailure(cmd, "Search index not configured: "+str(ex), 6, ex)

    svc = LocalIngestService(icfg, indexer, log)
    try:
        parent = None
        if args.parentid:
            parent = svc.load_parent(args.parentid)

        filesets = svc.ingest(args.userdir, args.names, args.depositor, parent)
    except IngestError as ex:
        raise CommandFailure(cmd, str(ex), 1, ex)
    except IndexServiceException as ex:
        raise CommandFailure(cmd, "Search index failure during ingest: "+str(ex), 5, ex)
    except MalformedResponse as ex:
        raise CommandFailure(cmd, "Unexpected response from search index: "+str(ex), 3, ex)

    for fs in filesets:
        sys.stdout.write("%s\t%s\n" % (fs.id, fs.relative_path))
    return filesets
