#!/usr/bin/env python
"""The crispy command-line interface"""

BANNER = """Crispy Version 0.0.0.0.3
Press Ctrl+c to Exit
"""

import argparse
import sys


def stderr(*args):
    print(*args, file=sys.stderr)


# Line editing and recall history for input(), where the platform has it
try:
    import readline  # noqa: F401
except ImportError:
    pass

import crispylib

LANGUAGE = 'crispy'


def process_line(line, out=None, verbose=False):
    """Parse, print and evaluate one line of input.

    Returns True if the line both parsed and evaluated.
    """
    if out is None:
        out = sys.stdout
    try:
        expr = crispylib.parse(line)
    except crispylib.CalcSyntaxError as ex:
        if verbose:
            stderr('error:', ex)
        print("The phrase '%s' is not %s" % (line, LANGUAGE), file=out)
        return False

    # The tree goes out before evaluation, so it stays up even on error
    print(crispylib.to_string(expr), file=out)
    try:
        res = crispylib.evaluate(expr)
    except crispylib.CalcEvaluationError as ex:
        print('Error:%s' % ex, file=out)
        return False
    print('=' + crispylib.to_string(res), file=out)
    return True


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog=LANGUAGE,
        description="Evaluate prefix arithmetic such as (+ 1 (* 2 3)) exactly.")
    parser.add_argument('expressions', nargs='*', metavar='EXPR',
                        help="evaluate these and exit instead of starting a session")
    parser.add_argument('-p', '--prompt', default='crispy>',
                        help="interactive prompt (default: %(default)s)")
    parser.add_argument('-q', '--quiet', action='store_true',
                        help="don't print the banner")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="explain syntax errors on stderr")
    return parser.parse_args(argv)


def repl(prompt, verbose=False):
    try:
        while True:
            line = input(prompt)
            process_line(line, verbose=verbose)
    except EOFError:
        stderr('\ncaught EOF')
    except KeyboardInterrupt:
        stderr('\ninterrupted')


def main(argv=None):
    args = parse_args(argv)
    if args.expressions:
        results = [process_line(line, verbose=args.verbose) for line in args.expressions]
        return 0 if all(results) else 1

    if not args.quiet:
        stderr(BANNER)
    repl(args.prompt, args.verbose)
    return 0


if __name__ == '__main__':
    sys.exit(main())
