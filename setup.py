"""
Provides project-level commands. Commands are run via `python setup.py <command> [args]`

Commands available:

- apidoc: regenerate reST docs for inline pydoc comments
- autobuild: watch for changes to the reST files and rebuild the documentation, refreshing
   the browser.
"""

from setuptools import setup, Command

import os


class RunInRootCommand(Command):
    user_options = []

    def initialize_options(self):
        self.cwd = None

    def finalize_options(self):
        self.cwd = os.getcwd()

    def run(self):
        assert os.getcwd() == self.cwd, 'Must be in package root: %s' % self.cwd
        self.runcmd()

    def runcmd(self):
        pass


class ApiDocCommand(RunInRootCommand):
    description = "regenerates the API docs"

    def runcmd(self):
        os.system('"sphinx-apidoc" -f -e -o docs/apidoc src/x32link')


class AutoBuildCommand(RunInRootCommand):
    description = "watches the docs for changes and rebuilds them, automatically refreshing the browser page"

    def runcmd(self):
        os.system("sphinx-autobuild docs docs/_build/html -B")


setup(
    name='x32link-connector-py',
    version='0.1.0',
    description='Bridges X32 console mute/fader streams to on-air indicator state, '
                'with a CasparCG AMCP client for graphics playout.',
    url='',
    author='',
    author_email='',
    license='LGPL',
    python_requires='>=3.7',
    package_dir={'': 'src'},
    packages=['x32link', 'x32link.casparcg', 'x32link.conduit', 'x32link.config',
              'x32link.protocol', 'x32link.state', 'x32link.support'],
    package_data={'x32link.config': ['*.cfg']},
    install_requires=[
        'python-osc>=1.8',
        'configobj>=5.0.9',
    ],
    extras_require={
        'test': [
            'pytest',
            'PyHamcrest',
            'timeout-decorator',
        ],
    },
    zip_safe=False,
    cmdclass={
        'apidoc': ApiDocCommand,
        'autobuild': AutoBuildCommand
    }
)
