import json

import pytest
from click.testing import CliRunner
from rtm.CLI.main import cli

MANIFEST = {
    'runtimes': {
        'nodef': [
            {'kind': 'nodejs:6', 'image': {'name': 'nodejsaction'},
             'stemCells': [{'count': 1, 'memory': '128 MB'}]},
            {'kind': 'nodejs:8', 'default': True, 'image': {'name': 'nodejsaction', 'tag': '8'},
             'stemCells': [{'count': 2, 'memory': '256 MB'}]},
        ],
        'javaf': [
            {'kind': 'java:8', 'image': {'name': 'java8action'}},
            {'kind': 'java:11', 'image': {'name': 'java11action'}},
        ],
    },
    'blackboxes': [{'name': 'dockerskeleton', 'prefix': 'openwhisk'}],
}


@pytest.fixture
def manifest_file(tmp_path):
    path = tmp_path / "runtimes.json"
    path.write_text(json.dumps(MANIFEST))
    return str(path)


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])
    assert result.exit_code == 0
    assert 'Check that the manifest resolves' in result.output


def test_cli_validate(manifest_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', manifest_file, 'validate'])
    assert result.exit_code == 0
    assert 'Manifest OK: 2 families, 4 kinds.' in result.output


def test_cli_validate_no_file():
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', 'non_existent.json', 'validate'])
    assert result.exit_code == 1
    assert 'Error: non_existent.json not found.' in result.output


def test_cli_validate_multiple_defaults(tmp_path):
    path = tmp_path / "runtimes.json"
    path.write_text(json.dumps({'runtimes': {'ks': [
        {'kind': 'k1', 'default': True, 'image': {'name': 'i'}},
        {'kind': 'k2', 'default': True, 'image': {'name': 'i'}},
    ]}}))
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', str(path), 'validate'])
    assert result.exit_code == 1
    assert 'multiple default runtimes' in result.output


def test_cli_resolve(manifest_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', manifest_file, '--prefix', 'openwhisk', 'resolve', 'nodef:default'])
    assert result.exit_code == 0
    assert result.output.strip() == 'openwhisk/nodejsaction:8'


def test_cli_resolve_ambiguous(manifest_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', manifest_file, 'resolve', 'javaf:default'])
    assert result.exit_code == 1
    assert 'Error: javaf:default not found.' in result.output


def test_cli_kinds(manifest_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', manifest_file, 'kinds'])
    assert result.exit_code == 0
    assert 'java:11' in result.output
    assert 'nodejsaction:8' in result.output


def test_cli_stemcells(manifest_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', manifest_file, 'stemcells'])
    assert result.exit_code == 0
    lines = result.output.splitlines()[2:]
    assert len(lines) == 2
    assert '128 MB' in lines[0]
    assert '256 MB' in lines[1]


def test_cli_pull_policy(manifest_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', manifest_file, 'pull-policy', 'openwhisk/dockerskeleton'])
    assert result.output.strip() == 'skip'

    result = runner.invoke(cli, ['-f', manifest_file, 'pull-policy', 'openwhisk/nodejsaction'])
    assert result.output.strip() == 'pull'

    result = runner.invoke(cli, ['-f', manifest_file, '--bypass-local', '--local-prefix', 'whisk',
                                 'pull-policy', 'whisk/nodejsaction:8'])
    assert result.output.strip() == 'skip'


def test_cli_pull_policy_bad_image(manifest_file):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', manifest_file, 'pull-policy', 'p/a:x:y'])
    assert result.exit_code == 1
    assert 'Error:' in result.output


def test_cli_validate_directory(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', str(tmp_path), 'validate'])
    assert result.exit_code == 1
    assert 'Error: cannot read' in result.output


def test_cli_validate_not_utf8(tmp_path):
    path = tmp_path / "runtimes.json"
    path.write_bytes(b'{"runtimes": {"\xff\xfe": []}}')
    runner = CliRunner()
    result = runner.invoke(cli, ['-f', str(path), 'validate'])
    assert result.exit_code == 1
    assert 'Error: cannot read' in result.output
