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


"""
The SCM module converts the branch source of a multi-branch pipeline.

A multi-branch pipeline reads its branches from exactly one source, written
as ``sources/data/jenkins.branch.BranchSource/source``. The ``class``
attribute of ``<source>`` tells which kind of source it is:

=================== =========================================================
source_type         class
=================== =========================================================
git                 jenkins.plugins.git.GitSCMSource
github              org.jenkinsci.plugins.github_branch_source.GitHubSCMSource
bitbucket_server    com.cloudbees.jenkins.plugins.bitbucket.BitbucketSCMSource
svn                 jenkins.scm.impl.subversion.SubversionSCMSource
single_svn          jenkins.scm.impl.SingleSCMSource
=================== =========================================================

Example::

  multi_branch_pipeline:
    name: devops
    source_type: github
    github_source:
      owner: kubesphere
      repo: devops
      credential_id: github
      discover_branches: 1
      discover_pr_from_origin: 2
      discover_pr_from_forks:
        strategy: 1
        trust: 2
      git_clone_option:
        shallow: false
        depth: 3
        timeout: 20
      regex_filter: ".*"
"""

import logging
import xml.etree.ElementTree as XML

from jenkins_pipelines import definitions
import jenkins_pipelines.modules.helpers as helpers

logger = logging.getLogger(__name__)

GIT_TRAIT_PREFIX = 'jenkins.plugins.git.traits.'
CLONE_OPTION_TRAIT = GIT_TRAIT_PREFIX + 'CloneOptionTrait'
REGEX_TRAIT = 'jenkins.scm.impl.trait.RegexSCMHeadFilterTrait'


def clone_option(traits, option):
    """Shallow clone, depth and timeout used when checking out branches."""
    trait = XML.SubElement(traits, CLONE_OPTION_TRAIT)
    ext = XML.SubElement(
        trait, 'extension',
        {'class': 'hudson.plugins.git.extensions.impl.CloneOption'})
    mapping = [
        ('shallow', 'shallow', False),
        ('no_tags', 'noTags', False),
        ('honor_refspec', 'honorRefspec', True),
        ('reference', 'reference', ''),
        ('timeout', 'timeout', 10),
        ('depth', 'depth', 1),
    ]
    data = {'shallow': option.shallow}
    # negative values fall back to the plugin defaults
    if option.timeout >= 0:
        data['timeout'] = option.timeout
    if option.depth >= 0:
        data['depth'] = option.depth
    helpers.convert_mapping_to_xml(ext, data, mapping)


def clone_option_from_xml(traits):
    ext = traits.find(CLONE_OPTION_TRAIT + '/extension')
    if ext is None:
        return None
    return definitions.GitCloneOption(
        shallow=helpers.get_bool(ext, 'shallow'),
        timeout=helpers.get_int(ext, 'timeout'),
        depth=helpers.get_int(ext, 'depth'))


def regex_filter(traits, regex):
    trait = XML.SubElement(traits, REGEX_TRAIT, {'plugin': 'scm-api@2.4.0'})
    XML.SubElement(trait, 'regex').text = regex


def regex_filter_from_xml(traits):
    return helpers.get_text(traits, REGEX_TRAIT + '/regex')


def log_unknown_traits(traits, known):
    for trait in traits:
        if trait.tag not in known:
            logger.debug("Ignoring unsupported trait <%s>", trait.tag)


class ScmSource(object):
    """Converts one kind of branch source.

    ``gen_xml`` fills an empty ``<source>`` element and ``from_xml`` reads
    it back.
    """

    #: value of ``source_type`` in a multi-branch pipeline
    source_type = None
    #: ``class`` attribute of the ``<source>`` element
    jenkins_class = None
    plugin = None
    #: dataclass holding the decoded source
    definition = None

    @property
    def kind(self):
        return self.definition.kind

    def gen_xml(self, xml_parent, source):
        xml_parent.set('class', self.jenkins_class)
        xml_parent.set('plugin', self.plugin)
        XML.SubElement(xml_parent, 'id').text = source.scm_id

    def from_xml(self, xml_parent):
        raise NotImplementedError()


class Git(ScmSource):
    source_type = definitions.SOURCE_TYPE_GIT
    jenkins_class = 'jenkins.plugins.git.GitSCMSource'
    plugin = 'git'
    definition = definitions.GitSource

    BRANCH_TRAIT = GIT_TRAIT_PREFIX + 'BranchDiscoveryTrait'
    TAG_TRAIT = GIT_TRAIT_PREFIX + 'TagDiscoveryTrait'

    def gen_xml(self, xml_parent, source):
        super(Git, self).gen_xml(xml_parent, source)
        XML.SubElement(xml_parent, 'remote').text = source.url
        helpers.add_text_if(xml_parent, 'credentialsId', source.credential_id)

        traits = XML.SubElement(xml_parent, 'traits')
        if source.discover_branches:
            XML.SubElement(traits, self.BRANCH_TRAIT)
        if source.clone_option is not None:
            clone_option(traits, source.clone_option)
        if source.regex_filter:
            regex_filter(traits, source.regex_filter)
        if source.discover_tags:
            XML.SubElement(traits, self.TAG_TRAIT)

    def from_xml(self, xml_parent):
        source = self.definition(
            scm_id=helpers.get_text(xml_parent, 'id'),
            url=helpers.get_text(xml_parent, 'remote'),
            credential_id=helpers.get_text(xml_parent, 'credentialsId'))

        traits = xml_parent.find('traits')
        if traits is None:
            return source
        source.discover_branches = traits.find(self.BRANCH_TRAIT) is not None
        source.discover_tags = traits.find(self.TAG_TRAIT) is not None
        source.clone_option = clone_option_from_xml(traits)
        source.regex_filter = regex_filter_from_xml(traits)
        log_unknown_traits(traits, (self.BRANCH_TRAIT, self.TAG_TRAIT,
                                    CLONE_OPTION_TRAIT, REGEX_TRAIT))
        return source


class PullRequestSource(ScmSource):
    """Sources hosted on a forge that knows about pull requests.

    Subclasses set ``trait_prefix``, ``trust_prefix`` and ``trusts``.
    """

    trait_prefix = None
    #: ``class`` of the ``<trust>`` element, without the trust name
    trust_prefix = None
    #: trust value to trust name
    trusts = {}
    #: element holding the API location of the forge
    api_uri_tag = None

    def gen_xml(self, xml_parent, source):
        super(PullRequestSource, self).gen_xml(xml_parent, source)
        XML.SubElement(xml_parent, 'credentialsId').text = source.credential_id
        XML.SubElement(xml_parent, 'repoOwner').text = source.owner
        XML.SubElement(xml_parent, 'repository').text = source.repo
        self.gen_api_uri(xml_parent, source)

        traits = XML.SubElement(xml_parent, 'traits')
        if source.discover_branches != 0:
            trait = XML.SubElement(
                traits, self.trait_prefix + 'BranchDiscoveryTrait')
            XML.SubElement(trait, 'strategyId').text = str(
                source.discover_branches)
        if source.discover_pr_from_origin != 0:
            trait = XML.SubElement(
                traits, self.trait_prefix + 'OriginPullRequestDiscoveryTrait')
            XML.SubElement(trait, 'strategyId').text = str(
                source.discover_pr_from_origin)
        if source.discover_pr_from_forks is not None:
            self.gen_forks(traits, source.discover_pr_from_forks)
        if source.clone_option is not None:
            clone_option(traits, source.clone_option)
        if source.regex_filter:
            regex_filter(traits, source.regex_filter)
        if source.discover_tags:
            XML.SubElement(traits, self.trait_prefix + 'TagDiscoveryTrait')

    def gen_api_uri(self, xml_parent, source):
        XML.SubElement(xml_parent, self.api_uri_tag).text = source.api_uri

    def gen_forks(self, traits, forks):
        trait = XML.SubElement(
            traits, self.trait_prefix + 'ForkPullRequestDiscoveryTrait')
        XML.SubElement(trait, 'strategyId').text = str(forks.strategy)
        trust = self.trusts.get(forks.trust)
        if trust is None:
            logger.warning("Unknown trust %s for pull requests from forks "
                           "of a %s source", forks.trust, self.source_type)
            trust = ''
        XML.SubElement(trait, 'trust', {'class': self.trust_prefix + trust})

    def forks_from_xml(self, traits):
        trait = traits.find(self.trait_prefix + 'ForkPullRequestDiscoveryTrait')
        if trait is None:
            return None
        forks = definitions.DiscoverPRFromForks(
            strategy=helpers.get_int(trait, 'strategyId'))
        trust = trait.find('trust')
        if trust is not None:
            trust_class = trust.get('class', '')
            name = trust_class[len(self.trust_prefix):] \
                if trust_class.startswith(self.trust_prefix) else trust_class
            for value, trust_name in self.trusts.items():
                if trust_name == name:
                    forks.trust = value
                    break
            else:
                logger.debug("Unknown trust class '%s'", trust_class)
        return forks

    def from_xml(self, xml_parent):
        source = self.definition(
            scm_id=helpers.get_text(xml_parent, 'id'),
            credential_id=helpers.get_text(xml_parent, 'credentialsId'),
            owner=helpers.get_text(xml_parent, 'repoOwner'),
            repo=helpers.get_text(xml_parent, 'repository'),
            api_uri=helpers.get_text(xml_parent, self.api_uri_tag))

        traits = xml_parent.find('traits')
        if traits is None:
            return source
        branch_trait = self.trait_prefix + 'BranchDiscoveryTrait'
        origin_trait = self.trait_prefix + 'OriginPullRequestDiscoveryTrait'
        fork_trait = self.trait_prefix + 'ForkPullRequestDiscoveryTrait'
        tag_trait = self.trait_prefix + 'TagDiscoveryTrait'

        source.discover_branches = helpers.get_int(
            traits, branch_trait + '/strategyId')
        source.discover_pr_from_origin = helpers.get_int(
            traits, origin_trait + '/strategyId')
        source.discover_pr_from_forks = self.forks_from_xml(traits)
        source.discover_tags = traits.find(tag_trait) is not None
        source.clone_option = clone_option_from_xml(traits)
        source.regex_filter = regex_filter_from_xml(traits)
        log_unknown_traits(traits, (branch_trait, origin_trait, fork_trait,
                                    tag_trait, CLONE_OPTION_TRAIT,
                                    REGEX_TRAIT))
        return source


class GitHub(PullRequestSource):
    """Requires the Jenkins GitHub Branch Source plugin."""
    source_type = definitions.SOURCE_TYPE_GITHUB
    jenkins_class = 'org.jenkinsci.plugins.github_branch_source.GitHubSCMSource'
    plugin = 'github-branch-source'
    definition = definitions.GithubSource

    trait_prefix = 'org.jenkinsci.plugins.github__branch__source.'
    trust_prefix = ('org.jenkinsci.plugins.github_branch_source.'
                    'ForkPullRequestDiscoveryTrait$')
    trusts = {
        1: 'TrustContributors',
        2: 'TrustEveryone',
        3: 'TrustPermission',
        4: 'TrustNobody',
    }
    api_uri_tag = 'apiUri'

    def gen_api_uri(self, xml_parent, source):
        helpers.add_text_if(xml_parent, self.api_uri_tag, source.api_uri)


class BitbucketServer(PullRequestSource):
    """Requires the Jenkins Bitbucket Branch Source plugin."""
    source_type = definitions.SOURCE_TYPE_BITBUCKET_SERVER
    jenkins_class = 'com.cloudbees.jenkins.plugins.bitbucket.BitbucketSCMSource'
    plugin = 'cloudbees-bitbucket-branch-source'
    definition = definitions.BitbucketServerSource

    trait_prefix = 'com.cloudbees.jenkins.plugins.bitbucket.'
    trust_prefix = ('com.cloudbees.jenkins.plugins.bitbucket.'
                    'ForkPullRequestDiscoveryTrait$')
    trusts = {
        1: 'TrustNobody',
        2: 'TrustTeamForks',
        3: 'TrustEveryone',
    }
    api_uri_tag = 'serverUrl'


class Svn(ScmSource):
    """Subversion repository with branches, tags and trunk."""
    source_type = definitions.SOURCE_TYPE_SVN
    jenkins_class = 'jenkins.scm.impl.subversion.SubversionSCMSource'
    plugin = 'subversion'
    definition = definitions.SvnSource

    def gen_xml(self, xml_parent, source):
        super(Svn, self).gen_xml(xml_parent, source)
        helpers.add_text_if(xml_parent, 'credentialsId', source.credential_id)
        helpers.add_text_if(xml_parent, 'remoteBase', source.remote)
        helpers.add_text_if(xml_parent, 'includes', source.includes)
        helpers.add_text_if(xml_parent, 'excludes', source.excludes)

    def from_xml(self, xml_parent):
        return self.definition(
            scm_id=helpers.get_text(xml_parent, 'id'),
            remote=helpers.get_text(xml_parent, 'remoteBase'),
            credential_id=helpers.get_text(xml_parent, 'credentialsId'),
            includes=helpers.get_text(xml_parent, 'includes'),
            excludes=helpers.get_text(xml_parent, 'excludes'))


class SingleSvn(ScmSource):
    """A single Subversion location built as the ``master`` branch."""
    source_type = definitions.SOURCE_TYPE_SINGLE_SVN
    jenkins_class = 'jenkins.scm.impl.SingleSCMSource'
    plugin = 'scm-api'
    definition = definitions.SingleSvnSource

    LOCATION_TAG = 'hudson.scm.SubversionSCM_-ModuleLocation'

    def gen_xml(self, xml_parent, source):
        super(SingleSvn, self).gen_xml(xml_parent, source)
        XML.SubElement(xml_parent, 'name').text = 'master'

        scm = XML.SubElement(xml_parent, 'scm', {
            'class': 'hudson.scm.SubversionSCM',
            'plugin': 'subversion',
        })
        location = XML.SubElement(XML.SubElement(scm, 'locations'),
                                  self.LOCATION_TAG)
        helpers.add_text_if(location, 'remote', source.remote)
        helpers.add_text_if(location, 'credentialsId', source.credential_id)
        mapping = [
            ('local', 'local', '.'),
            ('depth-option', 'depthOption', 'infinity'),
            ('ignore-externals', 'ignoreExternalsOption', True),
            ('cancel-process-on-externals-fail',
             'cancelProcessOnExternalsFail', True),
        ]
        helpers.convert_mapping_to_xml(location, {}, mapping)

        mapping = [
            ('excluded-regions', 'excludedRegions', ''),
            ('included-regions', 'includedRegions', ''),
            ('excluded-users', 'excludedUsers', ''),
            ('excluded-revprop', 'excludedRevprop', ''),
            ('excluded-commit-messages', 'excludedCommitMessages', ''),
        ]
        helpers.convert_mapping_to_xml(scm, {}, mapping)
        XML.SubElement(scm, 'workspaceUpdater',
                       {'class': 'hudson.scm.subversion.UpdateUpdater'})
        mapping = [
            ('ignore-dir-prop-changes', 'ignoreDirPropChanges', False),
            ('filter-changelog', 'filterChangelog', False),
            ('quiet-operation', 'quietOperation', True),
        ]
        helpers.convert_mapping_to_xml(scm, {}, mapping)

    def from_xml(self, xml_parent):
        location = xml_parent.find('scm/locations/' + self.LOCATION_TAG)
        return self.definition(
            scm_id=helpers.get_text(xml_parent, 'id'),
            remote=helpers.get_text(location, 'remote'),
            credential_id=helpers.get_text(location, 'credentialsId'))


SOURCE_TYPES = dict(
    (codec.source_type, codec) for codec in (
        Git(),
        GitHub(),
        Svn(),
        SingleSvn(),
        BitbucketServer(),
    )
)

SOURCE_CLASSES = dict(
    (codec.jenkins_class, codec) for codec in SOURCE_TYPES.values())
