################################################################################
#
# @file     SimpleDecls.py
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

import copy
from collections import OrderedDict

from c_writer import Writer

class DumpElement:
    """Base element of all the elements which have to be dumped. All printable elements like
    types, variables, functions .... derive from this class"""

    def __init__(self, name):
        self.name = name
        self.docbrief = ''
        self.docdetail = ''

    def addDocString(self, brief, detail = ''):
        self.docbrief = brief
        self.docdetail = detail

    def printDocString(self, writer, detail = True):
        if self.docbrief == '' and self.docdetail == '': return
        if detail and self.docdetail != '':
            writer.write('/**\n* @brief ')
            writer.write(self.docbrief + '\n', prefix = '*        ')
            writer.write('*\n' + self.docdetail + '\n', prefix = '* ')
            writer.write('*/\n')
        else:
            writer.write('/* ' + self.docbrief + ' */\n')

    def getIncludes(self):
        return []

    def __str__(self):
        stringWriter = Writer.StringWriter()
        self.writeDeclaration(stringWriter)
        return str(stringWriter)

class Type(DumpElement):
    """Represents a type; this is use for variable declaration, function parameter declaration ..."""

    def __init__(self, name, includes = [], const = False):
        DumpElement.__init__(self, name)
        if isinstance(includes, str):
            self.includes = [includes]
        else:
            self.includes = list(includes)
        self.modifiers = []
        self.const = const

    def makePointer(self):
        newType = copy.deepcopy(self)
        newType.modifiers.append('*')
        return newType

    def makeConst(self):
        newType = copy.deepcopy(self)
        newType.const = True
        return newType

    def writeDeclaration(self, writer):
        writer.write(str(self))

    def getIncludes(self):
        return copy.copy(self.includes)

    def __str__(self):
        typeStr = ''
        if self.const:
            typeStr += 'const '
        typeStr += self.name
        if self.modifiers:
            typeStr += ' ' + ''.join(self.modifiers)
        return typeStr

voidType = Type('void')
boolType = Type('bool', 'stdbool.h')
charType = Type('char')
intType = Type('int')
uintType = Type('unsigned')
int8Type = Type('int8_t', 'stdint.h')
int16Type = Type('int16_t', 'stdint.h')
int32Type = Type('int32_t', 'stdint.h')
int64Type = Type('int64_t', 'stdint.h')
uint8Type = Type('uint8_t', 'stdint.h')
uint16Type = Type('uint16_t', 'stdint.h')
uint32Type = Type('uint32_t', 'stdint.h')
uint64Type = Type('uint64_t', 'stdint.h')
charPtrType = charType.makeConst().makePointer()

def intTypeForBits(bitWidth, signed):
    """Smallest standard integer type holding bitWidth bits."""
    for size, sType, uType in ((8, int8Type, uint8Type), (16, int16Type, uint16Type), (32, int32Type, uint32Type), (64, int64Type, uint64Type)):
        if bitWidth <= size:
            if signed:
                return sType
            return uType
    raise Exception('No integer type can hold ' + str(bitWidth) + ' bits.')

class Parameter(DumpElement):
    """Represents a parameter of a function"""

    def __init__(self, name, type):
        DumpElement.__init__(self, name)
        self.type = type

    def writeDeclaration(self, writer):
        writer.write(str(self))

    def writeImplementation(self, writer):
        writer.write(str(self))

    def getIncludes(self):
        return copy.copy(self.type.getIncludes())

    def __str__(self):
        typeStr = str(self.type)
        if typeStr.endswith('*'):
            return typeStr + self.name
        return typeStr + ' ' + self.name

    def __repr__(self):
        return self.__str__()

class Variable(DumpElement):
    """Represents a variable of the program; this is a global variable
    such as a table, or a variable local to a function body. Array variables
    list their dimensions ('' for an unsized dimension)."""

    def __init__(self, name, varType, static = False, initValue = '', dimensions = []):
        DumpElement.__init__(self, name)
        self.varType = varType
        self.static = static
        self.initValue = initValue
        self.dimensions = list(dimensions)

    def declarator(self):
        decl = Parameter(self.name, self.varType).__str__()
        for dim in self.dimensions:
            decl += '[' + str(dim) + ']'
        return decl

    def writeDeclaration(self, writer):
        # Static variables are private to the implementation file.
        if self.static:
            return
        if self.docbrief:
            self.printDocString(writer)
        writer.write('extern ' + self.declarator() + ';\n')

    def writeImplementation(self, writer):
        if self.docbrief:
            self.printDocString(writer)
        if self.static:
            writer.write('static ')
        writer.write(self.declarator())
        if self.initValue:
            writer.write(' = ' + self.initValue)
        writer.write(';\n')

    def getIncludes(self):
        return copy.copy(self.varType.getIncludes())

    def __str__(self):
        varStr = ''
        if self.static:
            varStr += 'static '
        varStr += self.declarator()
        if self.initValue:
            varStr += ' = ' + self.initValue
        varStr += ';\n'
        return varStr

class Function(DumpElement):
    """Represents a function of the program. Inline functions are written
    with their body in the header; static functions are private to the
    implementation file."""

    def __init__(self, name, body, retType = voidType, parameters = [], static = False, inline = False):
        DumpElement.__init__(self, name)
        self.body = body
        self.parameters = list(parameters)
        self.retType = retType
        self.static = static
        self.inline = inline

    def prototype(self):
        proto = ''
        if self.static:
            proto += 'static '
        if self.inline:
            proto += 'inline '
        proto += str(self.retType)
        if not proto.endswith('*'):
            proto += ' '
        proto += self.name + '(' + ', '.join([str(i) for i in self.parameters]) + ')'
        return proto

    def writeBody(self, writer):
        if self.docbrief:
            self.printDocString(writer)
        writer.write(self.prototype() + ' {\n', split = ',')
        self.body.writeImplementation(writer)
        writer.write('} // ' + self.name + '()\n')

    def writeDeclaration(self, writer):
        if self.inline:
            self.writeBody(writer)
        else:
            if self.docbrief:
                self.printDocString(writer)
            writer.write(self.prototype() + ';\n', split = ',')

    def writeImplementation(self, writer):
        if self.inline:
            return
        self.writeBody(writer)

    def getIncludes(self):
        includes = copy.copy(self.retType.getIncludes())
        for i in self.parameters:
            for j in i.getIncludes():
                if not j in includes:
                    includes.append(j)
        for j in self.body.getIncludes():
            if not j in includes:
                includes.append(j)
        return includes

class Enum(DumpElement):
    """Represents the declaration of an enumeration type; with typedef the
    name is the one of the defined type."""

    def __init__(self, name, values, typedef = False):
        DumpElement.__init__(self, name)
        self.values = OrderedDict(values)
        self.typedef = typedef

    def addValue(self, name, value = ''):
        self.values[name] = value

    def writeDeclaration(self, writer):
        if self.docbrief:
            self.printDocString(writer)
        if not self.values:
            raise Exception('Cannot print empty enum ' + self.name + '.')
        if self.typedef:
            code = 'typedef enum {\n'
        else:
            code = 'enum ' + self.name + ' {\n'
        for key, val in self.values.items():
            code += key
            if val != '':
                code += ' = ' + str(val)
            code += ',\n'
        if self.typedef:
            writer.write(code[:-2] + '\n} ' + self.name + ';\n')
        else:
            writer.write(code[:-2] + '\n}; // enum ' + self.name + '\n')

    def writeImplementation(self, writer):
        pass

class BitFieldMember(DumpElement):
    """A single bit field of a structure or union"""

    def __init__(self, name, memberType, width):
        DumpElement.__init__(self, name)
        self.memberType = memberType
        self.width = width

    def writeImplementation(self, writer):
        writer.write(str(self.memberType) + ' ' + self.name + ' : ' + str(self.width) + ';\n')

    def getIncludes(self):
        return self.memberType.getIncludes()

class Union(DumpElement):
    """Represents a union; an unnamed union is written inline in the enclosing
    structure, optionally wrapped by a packing macro."""

    def __init__(self, name, members = [], packMacro = ''):
        DumpElement.__init__(self, name)
        self.members = list(members)
        self.packMacro = packMacro

    def addMember(self, member):
        self.members.append(member)

    def writeImplementation(self, writer):
        if not self.members:
            raise Exception('Cannot print empty union.')
        opening = 'union '
        if self.name:
            opening += self.name + ' '
        opening += '{\n'
        closing = '}'
        if self.packMacro:
            opening = self.packMacro + '(' + opening
            closing += ')'
        writer.write(opening)
        for i in self.members:
            i.writeImplementation(writer)
        writer.write(closing + ';\n')

    def writeDeclaration(self, writer):
        if self.docbrief:
            self.printDocString(writer)
        self.writeImplementation(writer)

    def getIncludes(self):
        includes = []
        for i in self.members:
            for j in i.getIncludes():
                if not j in includes:
                    includes.append(j)
        return includes

class BitField(DumpElement):
    """Represents a structure made of bit fields and unions of bit fields"""

    def __init__(self, name, members = [], typedef = True):
        DumpElement.__init__(self, name)
        self.members = list(members)
        self.typedef = typedef

    def addMember(self, member):
        self.members.append(member)

    def writeDeclaration(self, writer):
        if self.docbrief:
            self.printDocString(writer)
        if not self.members:
            raise Exception('Cannot print empty bitfield ' + self.name + '.')
        if self.typedef:
            writer.write('typedef struct {\n')
        else:
            writer.write('struct ' + self.name + ' {\n')
        for i in self.members:
            i.writeImplementation(writer)
        if self.typedef:
            writer.write('} ' + self.name + ';\n')
        else:
            writer.write('};\n')

    def writeImplementation(self, writer):
        pass

    def getIncludes(self):
        includes = []
        for i in self.members:
            for j in i.getIncludes():
                if not j in includes:
                    includes.append(j)
        return includes
