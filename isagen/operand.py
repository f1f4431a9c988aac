################################################################################
#
# @file     operand.py
# @brief    This file is part of the ISAGEN instruction model module.
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

import re

from isagen import x64Defs
from isagen.errors import UnrecognizedOperandSyntax, UnknownImplicitRegister, UnhandledVariant
from isagen.operandSpec import parseOperands

################################################################################
# Globals and Helpers
################################################################################
IMM_OP_RE = re.compile(r'^(imm|rel)(\d+)?$')
RM_OP_RE = re.compile(r'^(?:(?P<vreg>xmm|ymm|zmm|mm)|(?P<gpreg>r)(?P<regSize>\d+)?)/m(?P<memSize>\d+)$|^rm(?P<rmSize>\d+)$')
REG_OP_RE = re.compile(r'^(?P<vreg>xmm|ymm|zmm|mm)(?:\[\d+\.\.\d+\])?$|^(?P<gpreg>r)(?P<regSize>\d+)$')
MEM_OP_RE = re.compile(r'^m(\d*)$')
MOFFS_OP_RE = re.compile(r'^moffs(\d+)$')
VSIB_OP_RE = re.compile(r'^vm(\d+)([xyz])(\d+)$')

GP_REGISTER_SIZES = [8, 16, 32, 64]
VSIB_INDEX_SIZES = {'x': 128, 'y': 256, 'z': 512}
WORD_TYPES = {8: 'lb', 16: 'w', 32: 'dw', 64: 'lqw', 128: 'dqw', 256: 'vw', 512: 'vw'}

def sizeToWordType(size):
    if size is None:
        return None
    if not size in WORD_TYPES:
        raise UnhandledVariant('No word type for operand size ' + str(size))
    return WORD_TYPES[size]

class ParameterCounter:
    """Hands out the indices of the parameters of one instruction.
    Immediates and registers are numbered independently."""
    def __init__(self):
        self.immCounter = 0
        self.regCounter = 0

    def nextImmIndex(self):
        index = self.immCounter
        self.immCounter += 1
        return index

    def nextRegIndex(self):
        index = self.regCounter
        self.regCounter += 1
        return index

################################################################################
# Operands
################################################################################
class Operand:
    """An operand of an instruction. Explicit operands (lower case names)
    are classified by the rules below, the first matching rule wins;
    implicit operands (upper case names) are fixed registers, register
    addressed memory or immediate constants and never get a parameter."""
    def __init__(self, spec, counter, instrName = None):
        self.name = spec.name
        self.instrName = instrName
        self.flags = spec.flags
        self.accessedBits = spec.accessedBits
        self.readFlags = spec.readFlags
        self.writtenFlags = spec.writtenFlags
        self.undefinedFlags = spec.undefinedFlags

        self.read = 'r' in self.flags
        self.written = 'w' in self.flags
        self.conditionallyWritten = 'c' in self.flags
        self.undefined = 'u' in self.flags
        self.encoded = 'e' in self.flags
        self.mnemonic = 'm' in self.flags

        self.type = None
        self.parameterName = None
        self.registerType = None
        self.register = None
        self.registerSize = None
        self.registerWordType = None
        self.memSize = None
        self.immSize = None
        self.indexRegisterSize = None
        self.imm = None
        self.implicit = self.name == self.name.upper()

        if self.implicit:
            self.initImplicit()
        else:
            self.initExplicit(counter)

    def initExplicit(self, counter):
        for regex, initializer in self.explicitRules:
            match = regex.match(self.name)
            if match:
                initializer(self, match)
                break
        else:
            raise UnrecognizedOperandSyntax('Unexpected operand ' + self.name, self.instrName)

        if self.type == 'imm' and self.parameterName is None:
            self.parameterName = 'imm' + str(counter.nextImmIndex())
        elif self.type in ('reg', 'rm'):
            self.parameterName = 'reg' + str(counter.nextRegIndex())

    def initImm(self, match):
        self.type = 'imm'
        if match.group(2):
            self.immSize = int(match.group(2))
        if match.group(1) == 'rel':
            self.parameterName = 'rel'

    def initRm(self, match):
        self.type = 'rm'
        if match.group('rmSize'):
            memSize = int(match.group('rmSize'))
            self.initReg('r', memSize, memSize)
            return
        memSize = int(match.group('memSize'))
        if match.group('vreg'):
            self.initReg(match.group('vreg'), None, memSize)
        elif match.group('regSize'):
            self.initReg('r', int(match.group('regSize')), memSize)
        else:
            self.initReg('r', memSize, memSize)

    def initRegOnly(self, match):
        self.type = 'reg'
        if match.group('vreg'):
            self.initReg(match.group('vreg'), None)
        else:
            self.initReg('r', int(match.group('regSize')))

    def initMem(self, match):
        self.type = 'mem'
        if match.group(1):
            self.memSize = int(match.group(1))

    def initMoffs(self, match):
        self.type = 'mem'
        self.memSize = int(match.group(1))
        self.parameterName = 'moffs'

    def initVsib(self, match):
        self.type = 'vsib'
        self.memSize = int(match.group(3))
        self.indexRegisterSize = VSIB_INDEX_SIZES[match.group(2)]

    def initReg(self, reg, regSize, memSize = None):
        if reg == 'r':
            if not regSize in GP_REGISTER_SIZES:
                raise UnrecognizedOperandSyntax('Invalid general purpose register size ' + str(regSize) + ' in operand ' + self.name, self.instrName)
            self.registerType = 'gp'
            self.registerSize = regSize
        elif reg == 'xmm':
            self.registerType = 'xmm'
            self.registerSize = 128
        elif reg == 'ymm':
            self.registerType = 'xmm'
            self.registerSize = 256
        elif reg == 'zmm':
            self.registerType = 'zmm'
            self.registerSize = 512
        elif reg == 'mm':
            self.registerType = 'mm'
            self.registerSize = 64
        else:
            raise UnhandledVariant('Unexpected register class ' + reg, self.instrName)
        self.memSize = memSize

    def initImplicit(self):
        if re.match(r'^\d$', self.name):
            self.type = 'imm'
            self.imm = int(self.name)
            return

        regName = self.name.replace('[', '').replace(']', '').strip()
        if self.name.startswith('['):
            self.type = 'mem'
        else:
            self.type = 'reg'
        # Only the first register of an address expression is kept.
        if '+' in regName:
            regName = regName.split('+')[0].strip()

        if not regName in x64Defs.IMPLICIT_REGISTERS:
            raise UnknownImplicitRegister('Unexpected register ' + regName, self.instrName)
        self.registerType, self.register, self.registerSize, self.registerWordType = x64Defs.IMPLICIT_REGISTERS[regName]
        if self.type == 'reg' and self.registerType in ('rflags', 'mxcsr'):
            self.type = 'flags'

    explicitRules = [
        (IMM_OP_RE, initImm),
        (RM_OP_RE, initRm),
        (REG_OP_RE, initRegOnly),
        (MEM_OP_RE, initMem),
        (MOFFS_OP_RE, initMoffs),
        (VSIB_OP_RE, initVsib),
    ]

    def access(self):
        return [i for i in ('r', 'w', 'c', 'u') if i in self.flags]

    def size1(self):
        return self.registerSize or self.immSize or self.indexRegisterSize

    def size2(self):
        return self.memSize

    def wordType1(self):
        return self.registerWordType or sizeToWordType(self.size1())

    def wordType2(self):
        return sizeToWordType(self.size2())

    def __repr__(self):
        return self.name

class Operands:
    """The ordered operands of one instruction."""
    def __init__(self, spec, instrName = None):
        self.counter = ParameterCounter()
        self.operands = [Operand(i, self.counter, instrName) for i in parseOperands(spec, instrName)]

    def parameterNames(self):
        return [i.parameterName for i in self.operands if i.parameterName is not None]

    def __iter__(self):
        return iter(self.operands)

    def __len__(self):
        return len(self.operands)

    def __getitem__(self, index):
        return self.operands[index]
