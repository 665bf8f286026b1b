import os
import sys
import pytest

# Add repo root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from oci_add_hooks.wrapper_command_parser import WrapperCommandParser
from oci_add_hooks.utils.errors import UsageError

@pytest.fixture
def parser():
    """Create a WrapperCommandParser instance for testing."""
    return WrapperCommandParser()

def test_parse_version(parser):
    command = parser.parse_command(['oci-add-hooks', '--version'])
    assert command.show_version is True


def test_parse_version_commands_do_not_share_args(parser):
    first = parser.parse_command(['oci-add-hooks', '--version'])
    second = parser.parse_command(['oci-add-hooks', '--version'])
    first.runtime_args.append('create')
    assert second.runtime_args == []

def test_parse_command_basic(parser):
    args = ['oci-add-hooks', '--hook-config-path', '/etc/hooks.json', '--runtime-path', '/usr/bin/runc',
            'create', '--bundle', '/path/to/bundle', 'container-id']
    command = parser.parse_command(args)

    assert command.show_version is False
    assert command.hook_config_path == '/etc/hooks.json'
    assert command.runtime_path == '/usr/bin/runc'
    assert command.log_path is None
    assert command.runtime_args == ['create', '--bundle', '/path/to/bundle', 'container-id']

def test_parse_command_log_path(parser):
    args = ['oci-add-hooks', '--hook-config-path', '/etc/hooks.json', '--runtime-path', '/usr/bin/runc',
            '--log-path', '/var/log/oci-add-hooks', '--root', '/run/runc', 'state', 'ctr']
    command = parser.parse_command(args)

    assert command.log_path == '/var/log/oci-add-hooks'
    assert command.runtime_args == ['--root', '/run/runc', 'state', 'ctr']

def test_parse_command_runtime_version_passes_through(parser):
    args = ['oci-add-hooks', '--hook-config-path', 'h.json', '--runtime-path', 'runc', '--version']
    command = parser.parse_command(args)
    assert command.show_version is False
    assert command.runtime_args == ['--version']

@pytest.mark.parametrize("args", [
    ['oci-add-hooks'],
    ['oci-add-hooks', '--help'],
    ['oci-add-hooks', '--hook-config-path', 'h.json', '--runtime-path', 'runc'],
    ['oci-add-hooks', '--runtime-path', 'runc', '--hook-config-path', 'h.json', 'create'],
    ['oci-add-hooks', '--hook-config-path', 'h.json', '--runtime', 'runc', 'create'],
    ['oci-add-hooks', '--hook-config-path', '', '--runtime-path', 'runc', 'create'],
    ['oci-add-hooks', '--hook-config-path', 'h.json', '--runtime-path', '', 'create'],
    ['oci-add-hooks', '--hook-config-path', 'h.json', '--runtime-path', 'runc', '--log-path'],
    ['oci-add-hooks', '--version', 'extra'],
])
def test_parse_command_invalid(parser, args):
    with pytest.raises(UsageError):
        parser.parse_command(args)

@pytest.mark.parametrize("runtime_args, expected", [
    (['create', '--bundle', '/b', 'ctr'], '/b'),
    (['create', '-b', '/b', 'ctr'], '/b'),
    (['create', '--bundle=/b', 'ctr'], '/b'),
    (['create', '-b=/b', 'ctr'], '/b'),
    (['--root', '/run/runc', 'run', '--bundle', '/first', '--bundle', '/second'], '/first'),
    (['create', 'ctr', '--bundle'], None),
    (['state', 'ctr'], None),
    ([], None),
])
def test_find_bundle_path(parser, runtime_args, expected):
    assert parser.find_bundle_path(runtime_args) == expected

def test_find_bundle_config_path(parser):
    assert parser.find_bundle_config_path(['create', '--bundle', '/b', 'ctr']) == os.path.join('/b', 'config.json')
    assert parser.find_bundle_config_path(['delete', 'ctr']) is None
