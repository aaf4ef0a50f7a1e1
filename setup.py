import os
import setuptools
import sys

# Written according to the docs at
# https://packaging.python.org/en/latest/distributing.html

project_root = os.path.dirname(__file__)
readme_file = os.path.join(project_root, 'README.md')
module_root = os.path.join(project_root, 'copyfiles')
version_file = os.path.join(module_root, 'VERSION')


def get_version():
    with open(version_file) as f:
        return f.read().strip()


def get_install_requires():
    dependencies = ['docopt', 'PyYAML']
    if sys.version_info < (3, 6):
        raise RuntimeError('The minimum supported Python version is 3.6.')
    return dependencies


def readme_text():
    with open(readme_file) as f:
        return f.read().strip()


setuptools.setup(
    name='copyfiles',
    description='Copy files to a build worker before the build starts',
    version=get_version(),
    license='MIT',
    packages=['copyfiles'],
    package_data={'copyfiles': ['VERSION']},
    entry_points={'console_scripts': [
        'copyfiles=copyfiles.main:main',
    ]},
    install_requires=get_install_requires(),
    extras_require={'test': ['flake8', 'coverage']},
    long_description=readme_text(),
    long_description_content_type='text/markdown',
)
