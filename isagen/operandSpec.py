################################################################################
#
# @file     operandSpec.py
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
from isagen.errors import MalformedSpec

################################################################################
# Globals and Helpers
################################################################################
# Access modes and their canonical order: read, written, conditionally
# written, undefined, encoded as a field, significant for the mnemonic.
OPERAND_FLAGS = ['r', 'w', 'c', 'u', 'e', 'm']

flagRe = re.compile(r'([a-z])(?:\[(\d+)\.\.(\d+)\])?')

class OperandSpec:
    """The parsed form of a single name:flags segment. accessedBits maps an
    access mode to the inclusive bit range it is restricted to. Coalesced
    status registers also list the bits that are read, written and left
    undefined."""
    def __init__(self, name, flags, accessedBits = None, readFlags = None, writtenFlags = None, undefinedFlags = None):
        self.name = name
        self.flags = list(flags)
        if accessedBits is None:
            accessedBits = {}
        self.accessedBits = accessedBits
        self.readFlags = readFlags
        self.writtenFlags = writtenFlags
        self.undefinedFlags = undefinedFlags

    def __repr__(self):
        return self.name + ':' + ''.join(self.flags)

def parseFlags(flagsString, segment, instrName = None):
    flags = []
    accessedBits = {}
    pos = 0
    while pos < len(flagsString):
        flagMatch = flagRe.match(flagsString, pos)
        if not flagMatch or flagMatch.group(1) not in OPERAND_FLAGS:
            raise MalformedSpec('Invalid access flag ' + flagsString[pos] + ' in operand ' + segment, instrName)
        flag = flagMatch.group(1)
        if flag in flags:
            raise MalformedSpec('Access flag ' + flag + ' repeated in operand ' + segment, instrName)
        flags.append(flag)
        if flagMatch.group(2) is not None:
            fromBit = int(flagMatch.group(2))
            toBit = int(flagMatch.group(3))
            if fromBit > toBit:
                raise MalformedSpec('Invalid bit range ' + str(fromBit) + '..' + str(toBit) + ' in operand ' + segment, instrName)
            accessedBits[flag] = (fromBit, toBit)
        pos = flagMatch.end()
    return flags, accessedBits

################################################################################
# Parsing
################################################################################
def parseOperandsSpec(spec, instrName = None):
    """Splits a specification such as 'RAX:r; rm8:rw; imm8:r' into
    OperandSpec objects, one for each non empty segment."""
    specs = []
    for segment in spec.split(';'):
        segment = segment.strip()
        if not segment:
            continue
        if not ':' in segment:
            raise MalformedSpec('Missing separator : in operand ' + segment, instrName)
        name, flagsString = segment.split(':', 1)
        name = name.strip()
        if not name:
            raise MalformedSpec('Missing operand name in operand ' + segment, instrName)
        flags, accessedBits = parseFlags(flagsString.strip(), segment, instrName)
        specs.append(OperandSpec(name, flags, accessedBits))
    return specs

def coalesceStatusBits(regName, bitSpecs):
    flags = []
    for flag in OPERAND_FLAGS:
        for bitSpec in bitSpecs:
            if flag in bitSpec.flags:
                flags.append(flag)
                break
    readFlags = [i.name for i in bitSpecs if 'r' in i.flags]
    writtenFlags = [i.name for i in bitSpecs if 'w' in i.flags or 'c' in i.flags]
    undefinedFlags = [i.name for i in bitSpecs if 'u' in i.flags]
    return OperandSpec(regName, flags, {}, readFlags, writtenFlags, undefinedFlags)

def filterOperands(specs):
    """Replaces the single bits of RFLAGS and MXCSR with one operand per
    register, appended after the other operands. Ignored bits are dropped.
    An explicit operand naming the register absorbs its bits."""
    rflags = []
    mxcsr = []
    operands = []
    for spec in specs:
        if spec.name in x64Defs.IGNORED_RFLAGS or spec.name in x64Defs.IGNORED_MXCSR:
            continue
        if spec.name in x64Defs.RFLAGS_BITS:
            rflags.append(spec)
        elif spec.name in x64Defs.MXCSR_BITS:
            mxcsr.append(spec)
        else:
            operands.append(spec)

    for regName, bitSpecs in (('RFLAGS', rflags), ('MXCSR', mxcsr)):
        if not bitSpecs:
            continue
        composite = coalesceStatusBits(regName, bitSpecs)
        existing = [i for i in operands if i.name == regName]
        if existing:
            for flag in composite.flags:
                if not flag in existing[0].flags:
                    existing[0].flags.append(flag)
            existing[0].flags = [i for i in OPERAND_FLAGS if i in existing[0].flags]
            existing[0].readFlags = composite.readFlags
            existing[0].writtenFlags = composite.writtenFlags
            existing[0].undefinedFlags = composite.undefinedFlags
        else:
            operands.append(composite)
    return operands

def parseOperands(spec, instrName = None):
    return filterOperands(parseOperandsSpec(spec, instrName))
