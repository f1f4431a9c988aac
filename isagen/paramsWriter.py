################################################################################
#
# @file     paramsWriter.py
# @brief    This file is part of the ISAGEN C code generator module.
# @details
# @copyright
#
# This file is part of ISAGEN.
#
# ISAGEN is free software; you can redistribute it and/or modify
# it under the terms of the GNU Lesser General Public License as
# published by the Free Software Foundation; either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this program; if not, write to the
# Free Software Foundation, Inc.,
# 51 Franklin Street, Fifth Floor, Boston, MA  02110-1301  USA
# or see <http://www.gnu.org/licenses/>.
#
################################################################################

from collections import OrderedDict

import c_writer

from isagen import names
from isagen import x64Defs
from isagen.errors import UnknownFieldKind, FieldSetTooWide, UnhandledVariant

################################################################################
# Globals and Helpers
################################################################################
WORD_SIZE = 64

def parameterBitsize(paramName, basic = False):
    if basic and paramName in x64Defs.BASIC_PARAMETER_BITSIZES:
        return x64Defs.BASIC_PARAMETER_BITSIZES[paramName]
    if not paramName in x64Defs.PARAMETER_BITSIZES:
        raise UnknownFieldKind('Missing bit size for parameter ' + str(paramName))
    return x64Defs.PARAMETER_BITSIZES[paramName]

def parameterType(paramName, basic = False):
    if basic and paramName in x64Defs.BASIC_PARAMETER_KIND_TYPES:
        return x64Defs.BASIC_PARAMETER_KIND_TYPES[paramName]
    if not paramName in x64Defs.PARAMETER_KIND_TYPES:
        raise UnknownFieldKind('Missing type for parameter ' + str(paramName))
    return x64Defs.PARAMETER_KIND_TYPES[paramName]

def isSigned(paramName):
    return paramName in x64Defs.SIGNED_PARAMETERS

def isUndefinedable(paramName, basic = False):
    return paramName in x64Defs.UNDEFINEDABLE_PARAMETERS and paramName in parameterNames(basic)

def parameterNames(basic = False):
    if basic:
        return x64Defs.BASIC_PARAMETERS
    return x64Defs.PARAMETERS

def fieldType(bitsize, signed):
    """Storage type of a bit field: exact for 8, 16 and 32 bits, 64 bit
    wide otherwise."""
    if bitsize in (8, 16, 32):
        return c_writer.intTypeForBits(bitsize, signed)
    return c_writer.intTypeForBits(64, signed)

################################################################################
# Layout
################################################################################
class ParametersLayout:
    """Computes the packing of a set of parameter fields. Each field gets
    the width of its kind, undefinedable fields a further one bit presence
    flag; the fields are sorted by (width, name) and collected in their
    union, if any (unions keep the position of their first member). The
    total width, where a union counts as its widest member, must fit the
    word budget."""
    def __init__(self, paramNames, basic = False, unions = None, wordBudget = 4):
        self.basic = basic
        if unions is None:
            if basic:
                unions = x64Defs.BASIC_UNIONS
            else:
                unions = x64Defs.UNIONS
        self.unions = unions
        self.wordBudget = wordBudget

        fields = []
        for paramName in paramNames:
            fields.append((paramName, parameterBitsize(paramName, basic), isSigned(paramName)))
            if paramName in x64Defs.UNDEFINEDABLE_PARAMETERS:
                fields.append((paramName + '_set', 1, False))
        fields.sort(key = lambda field: (field[1], field[0]))

        groups = OrderedDict()
        for field in fields:
            groupKey = self.unionIndex(field[0])
            if groupKey is None:
                groupKey = field[0]
            groups.setdefault(groupKey, []).append(field)
        self.groups = list(groups.values())

        self.totalBits = 0
        for group in self.groups:
            self.totalBits += max([i[1] for i in group])
        if self.totalBits > self.wordBudget * WORD_SIZE:
            raise FieldSetTooWide('Parameter fields need ' + str(self.totalBits) + ' bits, ' + str(self.wordBudget * WORD_SIZE) + ' available.')

    def unionIndex(self, fieldName):
        for index, union in enumerate(self.unions):
            if fieldName in union:
                return index
        return None

    def words(self):
        return self.totalBits / float(WORD_SIZE)

    def fieldNames(self):
        return [field[0] for group in self.groups for field in group]

################################################################################
# Parameters struct declaration
################################################################################
def getParametersTypeDeclaration(layout):
    """Returns the packed struct holding the parameter fields"""
    members = []
    for group in layout.groups:
        groupMembers = [c_writer.BitFieldMember(name, fieldType(bitsize, signed), bitsize) for name, bitsize, signed in group]
        if len(groupMembers) > 1:
            members.append(c_writer.Union('', groupMembers, packMacro = 'evoasm_packed'))
        else:
            members.append(groupMembers[0])
    return c_writer.BitField(names.paramsTypeName(layout.basic), members)

################################################################################
# Parameters accessor functions
################################################################################
FUNCTION_KINDS = ['set', 'get', 'unset', 'get_type', 'get_name']

class ParametersFunction:
    """Accessor of the parameter struct, switching on the parameter id.
    The full variant is a static inline function (trailing underscore in
    the name) meant for the header; the stub variant is the exported
    function calling it."""
    def __init__(self, kind, basic = False, stub = False):
        if not kind in FUNCTION_KINDS + ['to_basic']:
            raise UnhandledVariant('Unknown parameters function ' + str(kind))
        self.kind = kind
        self.basic = basic
        self.stub = stub

    def functionName(self, stub = None):
        if stub is None:
            stub = self.stub
        name = names.NAMESPACE + '_' + names.ARCH
        if self.basic:
            name += '_basic'
        if self.kind in ('get_type', 'get_name', 'to_basic'):
            name += '_param'
        else:
            name += '_params'
        name += '_' + self.kind
        if not stub:
            name += '_'
        return name

    def returnType(self):
        if self.kind == 'get':
            return c_writer.int64Type
        elif self.kind in ('set', 'unset'):
            return c_writer.voidType
        elif self.kind == 'get_type':
            return c_writer.Type(names.enumTypeName('param_type'))
        elif self.kind == 'get_name':
            return c_writer.charPtrType
        return c_writer.Type(names.paramIdTypeName(True))

    def parameters(self):
        paramsParam = c_writer.Parameter('params', c_writer.Type(names.paramsTypeName(self.basic)).makePointer())
        idParam = c_writer.Parameter('param', c_writer.Type(names.paramIdTypeName(self.basic)))
        if self.kind == 'set':
            return [paramsParam, idParam, c_writer.Parameter('param_val', c_writer.int64Type)]
        elif self.kind in ('get', 'unset'):
            return [paramsParam, idParam]
        return [idParam]

    def switchCase(self, paramName):
        caseName = names.paramNameToC(paramName, self.basic)
        bitsize = parameterBitsize(paramName, self.basic)
        undefinedable = isUndefinedable(paramName, self.basic)
        if self.kind == 'get':
            return 'case ' + caseName + ': return (int64_t) params->' + paramName + ';\n'
        elif self.kind == 'set':
            code = 'case ' + caseName + ': {\n'
            code += 'params->' + paramName + ' = (' + str(fieldType(bitsize, isSigned(paramName))) + ') (((uint64_t) param_val) & ' + hex((1 << bitsize) - 1) + 'ull);\n'
            if undefinedable:
                code += 'params->' + paramName + '_set = true;\n'
            return code + 'break;\n}\n'
        elif self.kind == 'unset':
            code = 'case ' + caseName + ': {\n'
            code += 'params->' + paramName + ' = 0;\n'
            if undefinedable:
                code += 'params->' + paramName + '_set = false;\n'
            return code + 'break;\n}\n'
        elif self.kind == 'get_type':
            return 'case ' + caseName + ': return ' + names.paramTypeToC(parameterType(paramName, self.basic)) + ';\n'
        elif self.kind == 'get_name':
            return 'case ' + caseName + ': return "' + paramName + '";\n'
        if paramName in x64Defs.BASIC_PARAMETERS:
            return 'case ' + caseName + ': return ' + names.paramNameToC(paramName, True) + ';\n'
        return 'case ' + caseName + ': return ' + names.paramNameToC('none', True) + ';\n'

    def getBody(self):
        if self.stub:
            call = self.functionName(False) + '(' + ', '.join([i.name for i in self.parameters()]) + ');'
            if self.kind in ('set', 'unset'):
                return c_writer.Code(call)
            return c_writer.Code('return ' + call)
        code = 'switch(param) {\n'
        for paramName in parameterNames(self.basic):
            code += self.switchCase(paramName)
        code += 'default:\nevoasm_assert_not_reached();\n}'
        return c_writer.Code(code, ['stdbool.h', 'stdint.h'])

    def getFunction(self):
        return c_writer.Function(self.functionName(), self.getBody(), self.returnType(), self.parameters(), static = not self.stub, inline = not self.stub)

def getParametersFunctions(stub):
    """All the accessors in emission order: each kind for the full and the
    basic parameters, then the conversion to basic parameter ids."""
    functions = []
    for kind in FUNCTION_KINDS:
        functions.append(ParametersFunction(kind, False, stub).getFunction())
        functions.append(ParametersFunction(kind, True, stub).getFunction())
    functions.append(ParametersFunction('to_basic', False, stub).getFunction())
    return functions
