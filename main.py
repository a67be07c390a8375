#!/usr/bin/env python3
# -*- coding: utf-8 -*-
#
#  main.py
#
#  Copyright 2022 John Magdy Lotfy Kamel (Zorono) <johnmagdy437@yahoo.com>
#
#  This program is free software; you can redistribute it and/or modify
#  it under the terms of the GNU General Public License as published by
#  the Free Software Foundation; either version 2 of the License, or
#  (at your option) any later version.
#
#  This program is distributed in the hope that it will be useful,
#  but WITHOUT ANY WARRANTY; without even the implied warranty of
#  MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#  GNU General Public License for more details.
#
#  You should have received a copy of the GNU General Public License
#  along with this program; if not, write to the Free Software
#  Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston,
#  MA 02110-1301, USA.
#

import argparse
import configparser
import os
import sys
from pathlib import Path

from hosts import EtcHosts, FormatError, parse_ip, split_lines
from helpers import (
                        SettingsError,
                        get_file_by_url,
                        load_settings,
                        print_failure,
                        print_info,
                        print_success
)

BASEDIR_PATH = os.path.dirname(os.path.realpath(__file__))
SETTINGS_PATH = os.path.join(BASEDIR_PATH, 'settings.ini')


class PeerListError(Exception):
    pass


def ip_literal(value):
    try:
        return parse_ip(value)
    except FormatError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser():
    parser = argparse.ArgumentParser(prog="hosts-updater", description="Point every server's hosts file at its peers.")
    parser.add_argument('--sfile', type=str, help="Path to Settings file", required=False, metavar='<PATH>')
    parser.add_argument('--base', type=str, help="Directory holding the per-server config trees", required=False, metavar='<PATH>')
    parser.add_argument('--prefix', type=str, help="Hostname prefix of generated aliases", required=False, metavar='<STR>')
    parser.add_argument('--ipfile', type=str, help="Read more peer addresses from a file or URL", required=False, metavar='<PATH|URL>')
    parser.add_argument('--verbose', action='store_true', help="Verbose output")

    commands = parser.add_subparsers(dest='command', metavar='{print,write}')
    commands.required = True
    show = commands.add_parser('print', help="Print <base>/<prefix><i+1>/etc/hosts updated with every peer")
    show.add_argument('ips', type=ip_literal, nargs='*', metavar='IP')
    write = commands.add_parser('write', help="Rewrite <base>/<prefix><i>/etc/hosts in place, own alias on loopback")
    write.add_argument('ips', type=ip_literal, nargs='*', metavar='IP')
    return parser


def hostname(prefix, index):
    return f"{prefix}{index}"


def host_path(base, prefix, index):
    """Location of the hosts file for the server with the given 1-based index."""
    return Path(base) / hostname(prefix, index) / 'etc' / 'hosts'


def load_peer_list(source):
    """
    Read peer addresses, one per line, from a local file or an http(s) URL.

    Blank lines and ``#`` comments are skipped.

    Parameters
    ----------
    source : str
        A filesystem path or a URL.

    Returns
    -------
    ips : list
        The addresses in file order.

    Raises
    ------
    PeerListError
        If the source cannot be read or holds something other than addresses.
    """

    if source.startswith(('http://', 'https://')):
        text = get_file_by_url(source)
        if text is None:
            raise PeerListError(f"Failed to fetch peer list from {source}")
    else:
        try:
            with open(source, 'r', newline='') as file:
                text = file.read()
        except OSError as e:
            raise PeerListError(f"Failed to handle file {source} : {e}") from e

    ips = []
    for line_number, line in enumerate(split_lines(text), 1):
        entry = line.partition('#')[0].strip()
        if not entry:
            continue
        try:
            ips.append(parse_ip(entry))
        except FormatError as e:
            raise PeerListError(f"{source}, line {line_number}: {e}") from e
    return ips


def update_hosts(text, ips, prefix, self_index=None, loopback=None):
    """
    Run one load, edit and serialize cycle over a hosts file's content.

    Peer ``j`` (1-based) is written as ``<prefix><j>``. When ``self_index``
    matches ``j`` the address is replaced by ``loopback``.
    """

    hosts = EtcHosts.from_str(text)
    for j, ip in enumerate(ips, 1):
        if j == self_index and loopback is not None:
            ip = loopback
        hosts.add_data(ip, hostname(prefix, j))
    return hosts.to_string()


def _read(path):
    with open(path, 'r', newline='') as file:
        return file.read()


def _load(path, **kwargs):
    text = _read(path)
    try:
        return update_hosts(text, **kwargs)
    except FormatError as e:
        raise FormatError(f"{path}, {e}") from e


def print_hosts(ips, base, prefix, verbose=False):
    for i in range(1, len(ips) + 1):
        path = host_path(base, prefix, i + 1)
        if verbose:
            print_info(f"Processing File {path}")
        print(_load(path, ips=ips, prefix=prefix), end='')


def write_hosts(ips, base, prefix, loopback, verbose=False):
    for i in range(1, len(ips) + 1):
        path = host_path(base, prefix, i)
        if verbose:
            print_info(f"Processing File {path}")
        content = _load(path, ips=ips, prefix=prefix, self_index=i, loopback=loopback)
        with open(path, 'w') as file:
            file.write(content)
        if verbose:
            print_success(f"Wrote {path}")


def main(args=None):
    args = build_parser().parse_args(args)
    try:
        settings = load_settings(args.sfile or SETTINGS_PATH, required=args.sfile is not None)
        base = args.base or settings.get('General', 'base')
        prefix = args.prefix if args.prefix is not None else settings.get('General', 'prefix')
        verbose = args.verbose or settings.getboolean('General', 'verbose')
        loopback = parse_ip(settings.get('Hosts', 'loopback'))

        ips = list(args.ips)
        if args.ipfile:
            ips += load_peer_list(args.ipfile)
        if not ips:
            print_failure("No peer addresses given")
            return 1

        if args.command == 'print':
            print_hosts(ips, base, prefix, verbose)
        else:
            write_hosts(ips, base, prefix, loopback, verbose)
    except KeyboardInterrupt:
        print('Exiting...')
        return 130
    except (ValueError, configparser.Error, PeerListError, SettingsError) as e:
        print_failure(f"Sorry, something went wrong\n{e}")
        return 1
    except OSError as e:
        print_failure(f"Failed to handle file: {e}")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
