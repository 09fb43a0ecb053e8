import os
import sys
import argparse
from typing import List, Optional

from memo_bench_args import ScenarioArgs
from memo_bench.runner import BenchContext

DEFAULT_SCENARIO_FILE = ".memo-bench.d/scenario.yml"


def load_verified(path: str) -> Optional[ScenarioArgs]:
    if not os.path.isfile(path):
        print("%s does not exist." % path)
        return None
    print("verifying scenario file %s..." % (os.path.join(os.getcwd(), path)))
    conf = ScenarioArgs.from_yaml(path)
    if conf.error_counter.error_count > 0:
        conf.error_counter.print_errors()
        return None
    return conf


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description='time a memoized slow computation described by a scenario file')
    parser.add_argument('--file', dest="file",
                        default=DEFAULT_SCENARIO_FILE, help='scenario file name')
    parser.add_argument('--create', action="store_true",
                        help='create new scenario file by standard settings')
    parser.add_argument('--verify', action="store_true",
                        help='verify existing scenario file')
    parser.add_argument('--run', action="store_true",
                        help='verify and run existing scenario file')

    args = parser.parse_args(argv)
    path = args.file

    exit_code = 0
    if args.run:
        conf = load_verified(path)
        if conf is None:
            return 1
        bench = BenchContext(conf)
        bench.run()
        stats = bench.memo.stats()
        print("computation ran %d times for %d calls (%d cache hits)" %
              (stats.misses, len(bench.records), stats.hits))
        print("timings are written to %s" % bench.write_report())
        unresolved = bench.unresolved_keys()
        if len(unresolved) > 0:
            print("no call succeeded for keys %s" % ", ".join(map(repr, unresolved)))
            exit_code = 1
    elif args.verify:
        if load_verified(path) is None:
            exit_code = 1
        else:
            print("No obvious errors were found.")
    elif args.create:
        conf = ScenarioArgs.auto_configure()
        conf.write_as_yaml(path)
        print("scenario file is written to %s" %
              (os.path.join(os.getcwd(), path)))
    else:
        print("one of --create, --verify or --run must be specified")
        exit_code = 1
    return exit_code


if __name__ == '__main__':
    sys.exit(main())
