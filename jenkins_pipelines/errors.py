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

"""Exception classes for jenkins_pipelines errors"""

import inspect


def is_sequence(arg):
    return (not hasattr(arg, "strip") and
            (hasattr(arg, "__getitem__") or
             hasattr(arg, "__iter__")))


class JenkinsPipelinesException(Exception):
    pass


class ModuleError(JenkinsPipelinesException):

    def get_module_name(self):
        frame = inspect.currentframe()
        module_name = '<unresolved>'
        while frame:
            co_name = frame.f_code.co_name
            # XML generation or parsing done by a module class
            if co_name in ('root_xml', 'gen_xml', 'from_xml') and \
                    'self' in frame.f_locals:
                module_name = getattr(frame.f_locals['self'], 'kind',
                                      type(frame.f_locals['self']).__name__)
                break
            # definition loaded from a YAML or JSON mapping
            if co_name == 'from_dict' and 'cls' in frame.f_locals:
                module_name = getattr(frame.f_locals['cls'], 'kind',
                                      frame.f_locals['cls'].__name__)
                break
            frame = frame.f_back

        return module_name


class InvalidAttributeError(ModuleError):

    def __init__(self, attribute_name, value, valid_values=None,
                 module_name=None):
        module = module_name or self.get_module_name()
        message = "'{0}' is an invalid value for attribute {1}.{2}".format(
            value, module, attribute_name)

        if is_sequence(valid_values):
            message += "\nValid values include: {0}".format(
                ', '.join("'{0}'".format(value)
                          for value in valid_values))

        super(InvalidAttributeError, self).__init__(message)


class UnsupportedSourceTypeError(InvalidAttributeError):

    def __init__(self, source_type, valid_values=None):
        self.source_type = source_type
        super(UnsupportedSourceTypeError, self).__init__(
            'source_type', source_type, valid_values,
            module_name='multi-branch-pipeline')


class MissingAttributeError(ModuleError):

    def __init__(self, missing_attribute, module_name=None):
        module = module_name or self.get_module_name()
        if is_sequence(missing_attribute):
            message = "One of {0} must be present in '{1}'".format(
                ', '.join("'{0}'".format(value)
                          for value in missing_attribute), module)
        else:
            message = "Missing {0} from an instance of '{1}'".format(
                missing_attribute, module)

        super(MissingAttributeError, self).__init__(message)


class PipelineParseError(JenkinsPipelinesException):
    pass


class InvalidPipelineError(JenkinsPipelinesException):
    pass


class PipelineConfigException(JenkinsPipelinesException):
    pass
