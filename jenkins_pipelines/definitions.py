# Copyright (C) 2020 Jenkins Pipelines Contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

"""In-memory pipeline definitions.

A :class:`PipelineDefinition` is a tagged union of a single :class:`NoScmPipeline`
and a :class:`MultiBranchPipeline`. Values are plain dataclasses, so two
definitions compare equal field by field. ``from_dict`` and ``to_dict`` use
the field names of the Pipeline custom resource (``days_to_keep``,
``git_source``, ``multibranch_job_trigger`` ...).
"""

import dataclasses
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional

from jenkins_pipelines.errors import InvalidAttributeError
from jenkins_pipelines.errors import InvalidPipelineError
from jenkins_pipelines.errors import MissingAttributeError
from jenkins_pipelines.errors import UnsupportedSourceTypeError

__all__ = [
    "PipelineDefinition",
    "NoScmPipeline",
    "MultiBranchPipeline",
]

NO_SCM_PIPELINE_TYPE = 'pipeline'
MULTI_BRANCH_PIPELINE_TYPE = 'multi-branch-pipeline'

SOURCE_TYPE_GIT = 'git'
SOURCE_TYPE_GITHUB = 'github'
SOURCE_TYPE_SVN = 'svn'
SOURCE_TYPE_SINGLE_SVN = 'single_svn'
SOURCE_TYPE_BITBUCKET_SERVER = 'bitbucket_server'

PARAMETER_TYPES = ('string', 'text', 'boolean', 'password', 'choice', 'file')


def _key(f):
    return f.metadata.get('key', f.name)


def _coerce(cls, f, value, options):
    nested = f.metadata.get('nested')
    if nested is not None:
        if value is None:
            return None
        if not isinstance(value, dict):
            raise InvalidAttributeError(_key(f), value, module_name=cls.kind)
        return nested.from_dict(value, **options)

    nested_list = f.metadata.get('nested_list')
    if nested_list is not None:
        if not value:
            # an empty list and an absent one mean the same thing
            return None
        if not isinstance(value, list):
            raise InvalidAttributeError(_key(f), value, module_name=cls.kind)
        return [nested_list.from_dict(item, **options) for item in value]

    default = f.default
    if isinstance(default, bool):
        if isinstance(value, str):
            return value.strip().lower() == 'true'
        return bool(value)
    if isinstance(default, int):
        try:
            return int(value)
        except (TypeError, ValueError):
            raise InvalidAttributeError(_key(f), value, module_name=cls.kind)
    if value is None:
        return ''
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _from_dict(cls, data, **options):
    if not isinstance(data, dict):
        raise InvalidAttributeError(cls.kind, data, module_name=cls.kind)

    kwargs = {}
    for f in dataclasses.fields(cls):
        if f.metadata.get('skip'):
            continue
        key = _key(f)
        if key not in data:
            if f.default is dataclasses.MISSING:
                raise MissingAttributeError(key, module_name=cls.kind)
            continue
        kwargs[f.name] = _coerce(cls, f, data[key], options)
    return cls(**kwargs)


class _Definition(object):

    #: Name used in error messages for this kind of definition.
    kind = 'definition'

    @classmethod
    def from_dict(cls, data, **options):
        return _from_dict(cls, data, **options)

    def to_dict(self):
        data = {}
        for f in dataclasses.fields(self):
            if f.metadata.get('skip'):
                continue
            value = getattr(self, f.name)
            if f.metadata.get('nested') is not None:
                if value is not None:
                    data[_key(f)] = value.to_dict()
            elif f.metadata.get('nested_list') is not None:
                if value:
                    data[_key(f)] = [item.to_dict() for item in value]
            elif (value or f.metadata.get('required') or
                    f.default is dataclasses.MISSING):
                data[_key(f)] = value
        return data


@dataclass
class DiscarderProperty(_Definition):
    """Build retention. An empty value means unlimited."""
    kind: ClassVar[str] = 'discarder'

    days_to_keep: str = ''
    num_to_keep: str = ''


@dataclass
class TimerTrigger(_Definition):
    kind: ClassVar[str] = 'timer_trigger'

    # used by no scm pipelines
    cron: str = ''
    # used by multi-branch pipelines, in milliseconds
    interval: str = ''


@dataclass
class RemoteTrigger(_Definition):
    kind: ClassVar[str] = 'remote_trigger'

    token: str = ''


@dataclass
class Parameter(_Definition):
    """A job input parameter.

    For a ``choice`` parameter ``default_value`` holds the options joined
    by newlines. A ``file`` parameter has no default value.
    """
    kind: ClassVar[str] = 'parameter'

    name: str
    type: str
    default_value: str = ''
    description: str = ''

    @classmethod
    def from_dict(cls, data, allow_unknown_parameters=False, **options):
        param = _from_dict(cls, data)
        if param.type in PARAMETER_TYPES:
            return param
        if not allow_unknown_parameters:
            raise InvalidAttributeError('type', param.type, PARAMETER_TYPES,
                                        module_name=cls.kind)
        return UnknownParameter(
            name=param.name,
            type=param.type,
            default_value=data.get('default_value', 'unknown'),
            description=param.description)

    @property
    def known(self):
        return True


@dataclass
class UnknownParameter(Parameter):
    """A parameter whose kind is not supported; ``type`` is the raw tag."""

    default_value: str = 'unknown'

    @property
    def known(self):
        return False


@dataclass
class GitCloneOption(_Definition):
    kind: ClassVar[str] = 'git_clone_option'

    shallow: bool = False
    timeout: int = 0
    depth: int = 0


@dataclass
class DiscoverPRFromForks(_Definition):
    kind: ClassVar[str] = 'discover_pr_from_forks'

    strategy: int = 0
    trust: int = 0


@dataclass
class ScmSource(_Definition):
    """Base of the SCM source variants of a multi-branch pipeline."""
    kind: ClassVar[str] = 'source'

    #: The ``source_type`` value selecting this variant.
    source_type: ClassVar[str] = ''
    #: The key holding this variant in a multi-branch pipeline mapping.
    spec_key: ClassVar[str] = ''

    scm_id: str = ''


@dataclass
class GitSource(ScmSource):
    kind: ClassVar[str] = 'git_source'
    source_type: ClassVar[str] = SOURCE_TYPE_GIT
    spec_key: ClassVar[str] = 'git_source'

    url: str = ''
    credential_id: str = ''
    discover_branches: bool = False
    discover_tags: bool = False
    clone_option: Optional[GitCloneOption] = field(
        default=None,
        metadata={'key': 'git_clone_option', 'nested': GitCloneOption})
    regex_filter: str = ''


@dataclass
class PullRequestSource(ScmSource):
    """Fields shared by the GitHub and Bitbucket Server sources.

    The two are kept as distinct types since the meaning of
    ``discover_pr_from_forks.trust`` differs between them.
    """

    owner: str = ''
    repo: str = ''
    credential_id: str = ''
    api_uri: str = ''
    discover_branches: int = 0
    discover_pr_from_origin: int = 0
    discover_pr_from_forks: Optional[DiscoverPRFromForks] = field(
        default=None, metadata={'nested': DiscoverPRFromForks})
    discover_tags: bool = False
    clone_option: Optional[GitCloneOption] = field(
        default=None,
        metadata={'key': 'git_clone_option', 'nested': GitCloneOption})
    regex_filter: str = ''


@dataclass
class GithubSource(PullRequestSource):
    kind: ClassVar[str] = 'github_source'
    source_type: ClassVar[str] = SOURCE_TYPE_GITHUB
    spec_key: ClassVar[str] = 'github_source'


@dataclass
class BitbucketServerSource(PullRequestSource):
    kind: ClassVar[str] = 'bitbucket_server_source'
    source_type: ClassVar[str] = SOURCE_TYPE_BITBUCKET_SERVER
    spec_key: ClassVar[str] = 'bitbucket_server_source'


@dataclass
class SvnSource(ScmSource):
    kind: ClassVar[str] = 'svn_source'
    source_type: ClassVar[str] = SOURCE_TYPE_SVN
    spec_key: ClassVar[str] = 'svn_source'

    remote: str = ''
    credential_id: str = ''
    includes: str = ''
    excludes: str = ''


@dataclass
class SingleSvnSource(ScmSource):
    kind: ClassVar[str] = 'single_svn_source'
    source_type: ClassVar[str] = SOURCE_TYPE_SINGLE_SVN
    spec_key: ClassVar[str] = 'single_svn_source'

    remote: str = ''
    credential_id: str = ''


SCM_SOURCES = dict(
    (source.source_type, source) for source in (
        GitSource,
        GithubSource,
        SvnSource,
        SingleSvnSource,
        BitbucketServerSource,
    )
)


@dataclass
class MultiBranchJobTrigger(_Definition):
    """Pipelines to run when a branch is created or deleted."""
    kind: ClassVar[str] = 'multibranch_job_trigger'

    create_action_jobs_to_trigger: str = field(
        default='', metadata={'key': 'create_action_job_to_trigger'})
    delete_action_jobs_to_trigger: str = field(
        default='', metadata={'key': 'delete_action_job_to_trigger'})


@dataclass
class NoScmPipeline(_Definition):
    kind: ClassVar[str] = NO_SCM_PIPELINE_TYPE

    name: str
    description: str = ''
    discarder: Optional[DiscarderProperty] = field(
        default=None, metadata={'nested': DiscarderProperty})
    parameters: Optional[List[Parameter]] = field(
        default=None, metadata={'nested_list': Parameter})
    disable_concurrent: bool = False
    timer_trigger: Optional[TimerTrigger] = field(
        default=None, metadata={'nested': TimerTrigger})
    remote_trigger: Optional[RemoteTrigger] = field(
        default=None, metadata={'nested': RemoteTrigger})
    jenkinsfile: str = ''


@dataclass
class MultiBranchPipeline(_Definition):
    kind: ClassVar[str] = MULTI_BRANCH_PIPELINE_TYPE

    name: str
    description: str = ''
    discarder: Optional[DiscarderProperty] = field(
        default=None, metadata={'nested': DiscarderProperty})
    timer_trigger: Optional[TimerTrigger] = field(
        default=None, metadata={'nested': TimerTrigger})
    source_type: str = field(default='', metadata={'required': True})
    source: Optional[ScmSource] = field(
        default=None, metadata={'skip': True})
    script_path: str = field(default='', metadata={'required': True})
    multibranch_job_trigger: Optional[MultiBranchJobTrigger] = field(
        default=None, metadata={'nested': MultiBranchJobTrigger})

    @classmethod
    def from_dict(cls, data, **options):
        pipeline = _from_dict(cls, data, **options)
        if not pipeline.source_type:
            raise MissingAttributeError('source_type', module_name=cls.kind)
        source_cls = SCM_SOURCES.get(pipeline.source_type)
        if source_cls is None:
            raise UnsupportedSourceTypeError(pipeline.source_type,
                                             SCM_SOURCES.keys())

        others = [other.spec_key for other in SCM_SOURCES.values()
                  if other is not source_cls and
                  data.get(other.spec_key) is not None]
        if others:
            raise InvalidPipelineError(
                "source_type '{0}' can not be used together with {1}".format(
                    pipeline.source_type,
                    ', '.join("'{0}'".format(key) for key in others)))

        pipeline.source = source_cls.from_dict(
            data.get(source_cls.spec_key) or {})
        return pipeline

    def to_dict(self):
        data = super(MultiBranchPipeline, self).to_dict()
        if self.source is not None:
            data[self.source.spec_key] = self.source.to_dict()
        return data

    def validate(self):
        source_cls = SCM_SOURCES.get(self.source_type)
        if source_cls is None:
            raise UnsupportedSourceTypeError(self.source_type,
                                             SCM_SOURCES.keys())
        if type(self.source) is not source_cls:
            raise InvalidPipelineError(
                "source_type '{0}' requires a {1}, got {2}".format(
                    self.source_type, source_cls.__name__,
                    type(self.source).__name__))


PIPELINE_TYPES = {
    NO_SCM_PIPELINE_TYPE: 'pipeline',
    MULTI_BRANCH_PIPELINE_TYPE: 'multi_branch_pipeline',
}


@dataclass
class PipelineDefinition(_Definition):
    """Tagged union of the two pipeline kinds.

    ``type`` selects which one of ``pipeline`` and ``multi_branch_pipeline``
    is populated.
    """
    kind: ClassVar[str] = 'pipeline-definition'

    type: str
    pipeline: Optional[NoScmPipeline] = field(
        default=None, metadata={'nested': NoScmPipeline})
    multi_branch_pipeline: Optional[MultiBranchPipeline] = field(
        default=None, metadata={'nested': MultiBranchPipeline})

    @classmethod
    def from_dict(cls, data, **options):
        definition = _from_dict(cls, data, **options)
        definition.validate()
        return definition

    @property
    def payload(self):
        return getattr(self, PIPELINE_TYPES[self.type])

    @property
    def name(self):
        return self.payload.name

    def validate(self):
        if self.type not in PIPELINE_TYPES:
            raise InvalidAttributeError('type', self.type,
                                        PIPELINE_TYPES.keys(),
                                        module_name=self.kind)

        for pipeline_type, attribute in PIPELINE_TYPES.items():
            populated = getattr(self, attribute) is not None
            if pipeline_type == self.type and not populated:
                raise InvalidPipelineError(
                    "pipeline type '{0}' requires '{1}' to be set".format(
                        self.type, attribute))
            if pipeline_type != self.type and populated:
                raise InvalidPipelineError(
                    "pipeline type '{0}' can not be used together "
                    "with '{1}'".format(self.type, attribute))

        if self.type == MULTI_BRANCH_PIPELINE_TYPE:
            self.multi_branch_pipeline.validate()
