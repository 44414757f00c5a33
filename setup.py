# Copyright (C) 2020 Jenkins Pipelines Contributors
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

import setuptools

requires = [
    'PyYAML>=5.1',
    'pbr>=1.8',
    'stevedore>=1.17.1',
]
test_requires = [
    'fixtures>=3.0.0',
    'pytest',
    'testscenarios>=0.4',
    'testtools>=1.4.0',
]


setuptools.setup(
    name='jenkins-pipelines',
    version='0.1.0',
    author='Jenkins Pipelines Contributors',
    description='Convert pipeline definitions to and from Jenkins config.xml',
    license='Apache License, Version 2.0',
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=requires,
    extras_require={
        'test': test_requires,
    },
    python_requires='>=3.7',
    zip_safe=False,
    classifiers=[
        'Environment :: Console',
        'Intended Audience :: Developers',
        'Intended Audience :: Information Technology',
        'License :: OSI Approved :: Apache Software License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
    ],
    entry_points={
        'console_scripts': [
            'jenkins-pipelines=jenkins_pipelines.cli.entry:main',
        ],
        'jenkins_pipelines.cli.subcommands': [
            'encode=jenkins_pipelines.cli.subcommand.encode:EncodeSubCommand',
            'decode=jenkins_pipelines.cli.subcommand.decode:DecodeSubCommand',
        ],
        'jenkins_pipelines.projects': [
            'pipeline=jenkins_pipelines.modules.project_pipeline:Pipeline',
            'multi-branch-pipeline=jenkins_pipelines.modules.'
            'project_multibranch:WorkflowMultiBranch',
        ],
    }
)
