"""
module supporting the ``irepo`` command-line interface to repository operations.

EXIT STATUS

Commands built into this cli infrastructure follow the following conventions for exit status codes:

  0 - normal successful completion
  1 - the requested operation could not be completed given the current state of the system
  2 - an error was found in the option or argument values, preventing proper parsing or interpretation
  3 - the search index returned data that could not be interpreted
  4 - error occured while writing output data
  5 - an unexpected remote system error occured
  6 - if a configuration error was detected

The value 200 is returned if any unexpected, uncaught exception bubbles to the top of the execution stack.
"""
import os, sys, logging

from irepo import def_etc_dir, system
from irepo.utils import cli
from . import counts, ingest

description = "execute institutional repository operations"
epilog = None
default_prog_name = "irepo"
default_conf_file = os.path.join(def_etc_dir, "irepo-cli-config.yml") if def_etc_dir else None

def main(cmdname, args):
    """
    a function that executes the ``irepo`` command-line tool.
    """
    if not cmdname:
        cmdname = default_prog_name

    # set up the commands
    argparser = cli.define_prog_opts(cmdname, description, epilog)
    argparser.add_argument("-V", "--version", action="version",
                           version="%(prog)s " + system.system_version)
    suite = cli.CLISuite(cmdname, default_conf_file, argparser)
    suite.load_subcommand(counts)
    suite.load_subcommand(ingest)

    # execute the commands
    return suite.execute(args)

def run():
    prog = os.path.splitext(os.path.basename(sys.argv[0]))[0]
    try:
        main(prog, sys.argv[1:])
        sys.exit(0)
    except cli.CommandFailure as ex:
        logging.getLogger(f"{prog} {ex.cmd}").critical(str(ex))
        sys.exit(ex.stat)
    except Exception as ex:
        logging.getLogger(prog).exception(ex)
        sys.exit(200)

if __name__ == "__main__":
    run()
