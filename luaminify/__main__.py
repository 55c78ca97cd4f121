import sys
import argparse
import logging

from .cli import register_parsers

def getArgs():
    parser = argparse.ArgumentParser(
        description='lua minifier and beautifier')
    subparsers = parser.add_subparsers()
    parser.add_argument('--verbose', '-v', action='count', default=0)
    register_parsers(subparsers)
    args = parser.parse_args()

    return parser, args

def main():

    parser, args = getArgs()

    FORMAT = '%(levelname)-8s - %(message)s'
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format=FORMAT)

    rv = 0
    if not hasattr(args, 'func'):
        parser.print_help()
    else:
        rv = args.func(args)

    if rv:
        sys.exit(rv)

if __name__ == '__main__':
    main()
