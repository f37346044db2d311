""" Command line entry point: ``python -m roe``.
"""

import argparse
import logging
import sys

from . import begin
from . import config
from . import console


def parse_arguments(argv=None):

    description = 'Join a channel and relay messages between it and this terminal.'
    parser = argparse.ArgumentParser(prog='roe', description=description)

    parser.add_argument('-u', '--url', help='WebSocket endpoint (default from configuration)')
    parser.add_argument('-t', '--topic', help='channel topic; prompt for a character if omitted')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='log more; repeat for debug output')

    return parser.parse_args(argv)



def main(argv=None):

    arguments = parse_arguments(argv)

    if arguments.verbose >= 2:
        level = logging.DEBUG
    elif arguments.verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    configuration = config.get()
    if arguments.url is not None:
        configuration = configuration.copy(url=arguments.url)

    host = console.ConsoleHost(configuration)
    session = begin.connect(host, arguments.topic, configuration=configuration)

    try:
        console.relay(session, sys.stdin)
    except KeyboardInterrupt:
        pass

    session.close()
    session.wait_closed(5)
    return 0


if __name__ == '__main__':
    sys.exit(main())

# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
