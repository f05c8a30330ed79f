"""
CLI command that reports the collections a user may use along with the number of works and files
in each.
"""
import logging, argparse, sys, json

from irepo.utils.cli import CommandFailure
from irepo.exceptions import (ConfigurationException, IndexServerError, IndexClientError,
                              MalformedResponse)
from irepo.index.solr import create_solr_client
from irepo.colls import CollectionsCountService, DEF_JOIN_FIELD, READ, EDIT

default_name = "counts"
help = "report the number of works and files in each collection a user can access"
description = """
  List the collections that a user has read (or edit) access to, together with the number of works
  filed in each collection and the number of files attached to those works.  The counts are computed
  from the repository's search index.

  By default, the report is written to standard out as JSON; use --format text for a tabular listing.
"""

def load_into(subparser, current_dests=None, as_cmd=None):
    """
    load this command into a CLI by defining the command's arguments and options
    :param argparser.ArgumentParser subparser:  the argument parser instance to define this command's
                                                interface into it
    :rtype: None
    """
    p = subparser
    p.description = description
    p.add_argument("-a", "--access", choices=[READ, EDIT], default=READ, dest="access",
                   help="report collections the user has this access to (default: read)")
    p.add_argument("-j", "--join-field", metavar="FIELD", type=str, dest="joinfield",
                   help="the index field that links works to collections (default: %s)" % DEF_JOIN_FIELD)
    p.add_argument("-u", "--user", metavar="USERID", type=str, dest="user",
                   help="report for the user with this identifier (default: anonymous)")
    p.add_argument("-g", "--group", metavar="GROUP", type=str, dest="groups", action="append",
                   help="a group that the user is a member of (may be repeated)")
    p.add_argument("-U", "--solr-url", metavar="URL", type=str, dest="solrurl",
                   help="the base URL of the search index core, over-riding the configured one")
    p.add_argument("-f", "--format", choices=["json", "text"], default="json", dest="format",
                   help="the output format (default: json)")
    p.add_argument("-o", "--output-file", metavar="FILE", type=str, dest="outfile",
                   help="write the output to the named file instead of standard out")
    return None

def execute(args, config=None, log=None):
    """
    execute this command: compute and write out the collection counts report
    """
    cmd = default_name
    if not log:
        log = logging.getLogger(cmd)
    if not config:
        config = {}

    if isinstance(args, list):
        # cmd-line arguments not parsed yet
        p = argparse.ArgumentParser()
        load_into(p)
        args = p.parse_args(args)

    solrcfg = dict(config.get('solr', {}))
    if args.solrurl:
        solrcfg['service_endpoint'] = args.solrurl
        solrcfg.pop('core', None)
    try:
        solr = create_solr_client(solrcfg)
    except ConfigurationException as ex:
        raise CommandFailure(cmd, "Search index not configured: "+str(ex), 6, ex)

    svc = CollectionsCountService(solr, args.user, args.groups, config, log)
    try:
        results = svc.search_results_with_work_count(args.access, args.joinfield or DEF_JOIN_FIELD)
    except IndexServerError as ex:
        raise CommandFailure(cmd, "Search index unavailable: "+str(ex), 5, ex)
    except IndexClientError as ex:
        raise CommandFailure(cmd, "Search index rejected query: "+str(ex), 2, ex)
    except MalformedResponse as ex:
        raise CommandFailure(cmd, "Unexpected counts from search index: "+str(ex), 3, ex)

    log.info("Found %d collection(s) with %s access", len(results), args.access)

    fp = None
    try:
        if args.outfile and args.outfile != '-':
            fp = open(args.outfile, 'w')
            op = fp
        else:
            op = sys.stdout

        if args.format == "text":
            write_text_report(results, op)
        else:
            json.dump(to_json_report(results), op, indent=4, separators=(',', ': '))
            op.write("\n")

    except OSError as ex:
        raise CommandFailure(cmd, "Failed to write data to %s: %s" %
                             ((fp and args.outfile) or "standard out", str(ex)), 4)
    finally:
        if fp: fp.close()

    return results

def to_json_report(results):
    """
    convert the counts results into a JSON-encodable list
    """
    return [ { "id": r.collection_name.id, "title": r.collection_name.title,
               "modified": r.collection_name.modified,
               "work_count": r.work_count, "file_count": r.file_count } for r in results ]

def write_text_report(results, op):
    width = max([len(r.collection_name.id) for r in results] + [2])
    op.write("%-*s  %7s  %7s  %s\n" % (width, "ID", "WORKS", "FILES", "TITLE"))
    for r in results:
        op.write("%-*s  %7d  %7d  %s\n" % (width, r.collection_name.id, r.work_count, r.file_count,
                                           r.collection_name.title))
