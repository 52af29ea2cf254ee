#!/usr/bin/env python
"""Installation script."""
import logging

import setuptools
# inline:
# import git


NAME = 'fsmtest'
VERSION_FILE = f'{NAME}/_version.py'
MAJOR = 0
MINOR = 1
MICRO = 0
VERSION = f'{MAJOR}.{MINOR}.{MICRO}'
VERSION_TEXT = (
    '# This file was generated from setup.py\n'
    "version = '{version}'\n")
DESCRIPTION = (
    'Finite state machines and distinguishing traces '
    'for model-based testing')
PYTHON_REQUIRES = '>=3.10'
INSTALL_REQUIRES = [
    'networkx >= 2.0',
    'numpy >= 1.24']
EXTRAS_REQUIRE = dict(
    graphviz=[
        'graphviz >= 0.20'],
    test=[
        'pytest >= 4.6.11'])
logging.basicConfig(level=logging.WARNING)
_logger = logging.getLogger(__name__)


def git_version(
        version:
            str
        ) -> str:
    """Return version with local version identifier."""
    import git
    repo = git.Repo('.git')
    repo.git.status()
    sha = repo.head.commit.hexsha
    if repo.is_dirty():
        return f'{version}.dev0+{sha}.dirty'
    # commit is clean
    # is it release of `version` ?
    try:
        tag = repo.git.describe(
            match='v[0-9]*',
            exact_match=True,
            tags=True,
            dirty=True)
    except git.GitCommandError:
        return f'{version}.dev0+{sha}'
    assert tag == 'v' + version, (tag, version)
    return version


def run_setup() -> None:
    """Get version from `git`, install."""
    try:
        version = git_version(VERSION)
    except AssertionError:
        raise
    except Exception:
        _logger.info('No git info: Assume release.')
        version = VERSION
    s = VERSION_TEXT.format(version=version)
    with open(VERSION_FILE, 'w') as f:
        f.write(s)
    setuptools.setup(
        name=NAME,
        version=version,
        description=DESCRIPTION,
        license='BSD',
        python_requires=PYTHON_REQUIRES,
        install_requires=INSTALL_REQUIRES,
        extras_require=EXTRAS_REQUIRE,
        packages=[
            'fsmtest',
            'fsmtest.fsm',
            'fsmtest.trees'],
        package_dir={
            'fsmtest': 'fsmtest'})


if __name__ == '__main__':
    run_setup()
