import os, sys, logging, argparse, pdb, tempfile
import unittest as test

from irepo.utils import cli
from irepo.base import StateException
from irepo.base import config as cfgmod

tmpdir = tempfile.TemporaryDirectory(prefix="_test_cli.")

def tearDownModule():
    tmpdir.cleanup()

class TestModFunctions(test.TestCase):

    def test_define_prog_opts(self):
        p = cli.define_prog_opts("admin", "exert superpowers")
        self.assertEqual(p.prog, "admin")
        self.assertIn("superpowers", p.description)
        self.assertIn("help specifically on CMD", p.epilog)

        args = p.parse_args([])
        self.assertEqual(args.workdir, "")
        self.assertIsNone(args.conf)
        self.assertIsNone(args.logfile)
        self.assertFalse(args.quiet)
        self.assertFalse(args.verbose)
        self.assertFalse(args.debug)

        parser = argparse.ArgumentParser("fred", None, "go to work", "good work")
        p = cli.define_prog_opts("goob", parser=parser)
        self.assertTrue(p is parser)
        self.assertEqual(p.prog, "fred")
        self.assertIn("good work", p.epilog)

    def test_CommandFailure(self):
        ex = cli.CommandFailure("goob", "hey, don't do that!", 3)
        self.assertEqual(ex.cmd, "goob")
        self.assertEqual(ex.stat, 3)
        self.assertIsNone(ex.cause)
        self.assertEqual(str(ex), "hey, don't do that!")

        ex = cli.CommandFailure("goob", None, cause=ValueError("oops"))
        self.assertEqual(str(ex), "oops")
        self.assertEqual(ex.stat, 1)

class _TryCmd:
    default_name = "try"
    help = "try something"

    def __init__(self):
        self.executed = None

    def load_into(self, subparser, current_dests=None, as_cmd=None):
        subparser.add_argument("what", type=str)
        return None

    def execute(self, args, config, log):
        self.executed = (args.what, config)
        if args.what == "fail":
            raise cli.CommandFailure("", "it failed", 3)
        return args.what

class TestCLISuite(test.TestCase):

    def resetLogfile(self):
        rootlog = logging.getLogger()
        if cfgmod._log_handler:
            rootlog.removeHandler(cfgmod._log_handler)
            cfgmod._log_handler.close()
            cfgmod._log_handler = None

    def setUp(self):
        self.cmd = _TryCmd()
        self.suite = cli.CLISuite("irepotest")
        self.suite.load_subcommand(self.cmd)

    def tearDown(self):
        self.resetLogfile()

    def test_load_subcommand(self):
        self.assertIn("try", self.suite._cmds)
        self.assertIn("what", self.suite._dests)
        with self.assertRaises(StateException):
            self.suite.load_subcommand(object())

    def test_extract_config_for_cmd(self):
        config = { "a": 1, "cmd": { "try": { "a": 2, "b": 3 } } }
        out = self.suite.extract_config_for_cmd(config, "try", self.cmd)
        self.assertEqual(out, { "a": 2, "b": 3 })
        self.assertEqual(self.suite.extract_config_for_cmd({ "a": 1 }, "try"), { "a": 1 })

    def test_execute(self):
        out = self.suite.execute(["-q", "-w", tmpdir.name, "try", "this"], { "cmd": { "try": { "x": 1 }}})
        self.assertEqual(out, "this")
        self.assertEqual(self.cmd.executed[0], "this")
        self.assertEqual(self.cmd.executed[1]['x'], 1)
        self.assertEqual(self.cmd.executed[1]['working_dir'], tmpdir.name)
        self.assertTrue(os.path.exists(os.path.join(tmpdir.name, "irepotest.log")))

    def test_execute_failure(self):
        with self.assertRaises(cli.CommandFailure) as cm:
            self.suite.execute(["-q", "-w", tmpdir.name, "try", "fail"], {})
        self.assertEqual(cm.exception.cmd, "try")
        self.assertEqual(cm.exception.stat, 3)

    def test_bad_workdir(self):
        with self.assertRaises(cli.CommandFailure) as cm:
            self.suite.execute(["-q", "-w", os.path.join(tmpdir.name, "goober"), "try", "this"], {})
        self.assertEqual(cm.exception.stat, 2)

    def test_no_command(self):
        with self.assertRaises(cli.CommandFailure) as cm:
            self.suite.execute(["-q"], {})
        self.assertEqual(cm.exception.stat, 2)

    def test_bad_config_file(self):
        with self.assertRaises(cli.CommandFailure) as cm:
            self.suite.execute(["-q", "-c", os.path.join(tmpdir.name, "goober.yml"), "try", "this"])
        self.assertEqual(cm.exception.stat, 6)


if __name__ == '__main__':
    test.main()
