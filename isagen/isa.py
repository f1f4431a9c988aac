################################################################################
#
# @file     isa.py
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

import hashlib
import re
from collections import OrderedDict

from isagen import domains
from isagen import x64Defs
from isagen.errors import GenerationError
from isagen.operand import Operands

################################################################################
# Globals and Helpers
################################################################################
validInstrName = re.compile(r'^[a-z_][a-z0-9_]*$')

def checkNames(values, valid, what, instrName):
    for value in values:
        if not value in valid:
            raise GenerationError('Invalid ' + what + ' ' + str(value) + ', expected one of ' + str(valid) + '.', instrName)

################################################################################
# ISA
################################################################################
class ISA:
    """Represents the instruction set of the architecture: the ordered
    collection of the instructions to be translated. The position of an
    instruction is its emitted id."""
    def __init__(self, arch = 'x64'):
        if arch != 'x64':
            raise GenerationError('Invalid architecture ' + str(arch) + ', only x64 is supported.')
        self.arch = arch
        self.instructions = OrderedDict()

    def addInstruction(self, instruction):
        if instruction.name in self.instructions:
            raise GenerationError('Instruction ' + instruction.name + ' already exists in the ISA.')
        instruction.id = len(self.instructions)
        instruction.arch = self.arch
        self.instructions[instruction.name] = instruction

    def bitMasks(self):
        """Bit ranges written by the operands, sorted"""
        masks = set()
        for instr in self.instructions.values():
            for operand in instr.operands:
                if 'w' in operand.accessedBits:
                    masks.add(operand.accessedBits['w'])
        return sorted(masks)

    def getInstructionSig(self):
        """Returns the signature (in the form of a string) uniquely identifying
        the encoding of the instructions."""
        hashCreator = hashlib.md5()
        for name, instr in self.instructions.items():
            hashCreator.update((name + '_' + str(instr.id) + ':' + instr.operandsSpec + ':' + repr(instr.encoding) + ';').encode('utf-8'))
        return hashCreator.hexdigest()

    def __iter__(self):
        return iter(self.instructions.values())

    def __len__(self):
        return len(self.instructions)

    def __getitem__(self, name):
        return self.instructions[name]

################################################################################
# Instructions
################################################################################
class Instruction:
    """An instruction of the architecture: name, mnemonic, operands (given
    as an operand specification string, see operandSpec), the encoding
    (list of actions, see encoding) and the categorical data which ends in
    the instruction table: flags, required features and the exceptions it
    may raise. paramDomains overrides the domain of single parameters."""
    def __init__(self, name, mnemonic, operands, encoding, flags = (), features = (), exceptions = (), paramDomains = None):
        if not validInstrName.match(name):
            raise GenerationError('Invalid instruction name ' + name + ', expected a C identifier suffix.')
        self.name = name
        self.mnemonic = mnemonic
        checkNames(flags, x64Defs.INST_FLAGS, 'instruction flag', name)
        checkNames(features, x64Defs.FEATURES, 'feature', name)
        checkNames(exceptions, x64Defs.EXCEPTIONS, 'exception', name)
        self.flags = list(flags)
        self.features = list(features)
        self.exceptions = list(exceptions)
        self.operandsSpec = operands
        self.operands = Operands(operands, name)
        self.encoding = tuple(encoding)
        self.paramDomains = dict(paramDomains or {})
        # The instruction id is automatically assigned by the ISA class.
        self.id = 0
        self.arch = None

    def paramDomain(self, paramName):
        """Domain of a parameter: the instruction override, then the one
        implied by the operand, then the default of the parameter kind."""
        if paramName in self.paramDomains:
            return self.paramDomains[paramName]
        for operand in self.operands:
            if operand.parameterName == paramName:
                domain = domains.operandDomain(operand)
                if domain is not None:
                    return domain
            if paramName == 'reg_index' and operand.type == 'vsib':
                return domains.vsibIndexDomain(operand.indexRegisterSize)
        return domains.defaultDomain(paramName)

    def operandParameters(self):
        return self.operands.parameterNames()

    def __repr__(self):
        return self.name

    def __str__(self):
        return self.name
