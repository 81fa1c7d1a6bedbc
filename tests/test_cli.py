import logging
import pytest
import yaml
from click.testing import CliRunner

from roleforge.cli import cli
from roleforge.builder import role_dev_version
from roleforge.config import RoleManifest


@pytest.fixture(autouse=True)
def reset_root_logger():
    """The CLI installs handlers on the root logger; drop them between tests."""
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for handler in root.handlers[:]:
        if handler not in before:
            root.removeHandler(handler)


@pytest.fixture
def manifest_file(tmp_path, release_dir, compiled_dir, scripts_dir):
    data = {
        'releases': [{'name': 'tor', 'version': '0.3.5', 'path': release_dir.name}],
        'roles': [
            {
                'name': 'myrole',
                'scripts': [f'{scripts_dir.name}/myrole.sh'],
                'jobs': [
                    {'name': 'new_hostname', 'release': 'tor'},
                    {'name': 'tor', 'release': 'tor', 'packages': ['libevent', 'tor']},
                ],
            },
            {'name': 'foorole', 'jobs': [{'name': 'tor', 'release': 'tor', 'packages': ['tor']}]},
        ],
    }
    path = tmp_path / 'roles.yml'
    path.write_text(yaml.dump(data))
    return path


@pytest.fixture
def runner():
    return CliRunner()


def _names(result):
    """Image names echoed by the command, without any interleaved log lines."""
    return [line for line in result.output.splitlines() if line.startswith('foo-')]


def _build_args(manifest_file, compiled_dir, target, *extra):
    return [
        'build-images', str(manifest_file),
        '-r', 'foo',
        '-c', str(compiled_dir),
        '-t', str(target),
        '-b', '6.28.30',
        '-v', '3.14.15',
        '-n',
        *extra,
    ]


class TestBuildImages:

    def test_creates_build_contexts(self, runner, manifest_file, compiled_dir, tmp_path):
        target = tmp_path / 'out'
        result = runner.invoke(cli, _build_args(manifest_file, compiled_dir, target, '-w', '2'))
        assert result.exit_code == 0, result.output
        for role in ('myrole', 'foorole'):
            assert (target / role / 'Dockerfile').is_file()
        assert 'FROM foo-role-base:6.28.30' in (target / 'myrole' / 'Dockerfile').read_text()

    def test_selected_roles_only(self, runner, manifest_file, compiled_dir, tmp_path):
        target = tmp_path / 'out'
        result = runner.invoke(cli, _build_args(manifest_file, compiled_dir, target, '--roles', 'foorole'))
        assert result.exit_code == 0, result.output
        assert (target / 'foorole' / 'Dockerfile').is_file()
        assert not (target / 'myrole').exists()

    def test_dev_flag(self, runner, manifest_file, compiled_dir, tmp_path):
        target = tmp_path / 'out'
        result = runner.invoke(cli, _build_args(manifest_file, compiled_dir, target, '--dev'))
        assert result.exit_code == 0, result.output
        assert 'MAINTAINER' not in (target / 'foorole' / 'Dockerfile').read_text()

    @pytest.mark.parametrize('count', ['0', '-1'])
    def test_invalid_worker_count_aborts(self, runner, manifest_file, compiled_dir, tmp_path, count):
        target = tmp_path / 'out'
        result = runner.invoke(cli, _build_args(manifest_file, compiled_dir, target, '-w', count))
        assert result.exit_code != 0
        assert not target.exists()

    def test_unknown_role_aborts(self, runner, manifest_file, compiled_dir, tmp_path):
        result = runner.invoke(cli, _build_args(manifest_file, compiled_dir, tmp_path / 'out', '--roles', 'ghost'))
        assert result.exit_code != 0

    def test_missing_manifest_aborts(self, runner, compiled_dir, tmp_path):
        result = runner.invoke(cli, _build_args(tmp_path / 'absent.yml', compiled_dir, tmp_path / 'out'))
        assert result.exit_code != 0

    def test_version_is_required(self, runner, manifest_file, compiled_dir, tmp_path):
        args = [a for a in _build_args(manifest_file, compiled_dir, tmp_path / 'out') if a not in ('-v', '3.14.15')]
        result = runner.invoke(cli, args)
        assert result.exit_code == 2
        assert '--version' in result.output


class TestImageNames:

    def test_with_version(self, runner, manifest_file):
        result = runner.invoke(cli, ['image-names', str(manifest_file), '-r', 'foo', '-v', '1.0+dev'])
        assert result.exit_code == 0, result.output
        assert _names(result) == ['foo-myrole:1.0_dev', 'foo-foorole:1.0_dev']

    def test_defaults_to_content_version(self, runner, manifest_file):
        result = runner.invoke(cli, ['image-names', str(manifest_file), '-r', 'foo', '--roles', 'foorole'])
        assert result.exit_code == 0, result.output
        role = RoleManifest(str(manifest_file)).lookup_role('foorole')
        assert _names(result) == [f'foo-foorole:{role_dev_version(role)}']
