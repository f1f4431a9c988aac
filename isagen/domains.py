################################################################################
#
# @file     domains.py
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

from collections import OrderedDict

from isagen import x64Defs
from isagen.errors import GenerationError, DomainTooLarge, UnknownFieldKind

################################################################################
# Globals and Helpers
################################################################################
ENUM_MAX_LENGTH = 32

def memberKey(value):
    # Register names sort by register id, numbers by value.
    if isinstance(value, str):
        if not value in x64Defs.REGISTER_IDS:
            raise GenerationError('Unknown register ' + value + ' in enumeration.')
        return (1, x64Defs.REGISTER_IDS[value])
    return (0, value)

################################################################################
# Domains
################################################################################
class ParameterDomain:
    """Set of legal values of a parameter. Domains compare and hash by
    their content, so that equal domains built independently are
    emitted only once."""
    def key(self):
        raise NotImplementedError()

    def varName(self):
        raise NotImplementedError()

    def __eq__(self, other):
        return isinstance(other, ParameterDomain) and self.key() == other.key()

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(self.key())

    def __repr__(self):
        return self.varName()

class Interval(ParameterDomain):
    """Inclusive range of integers"""
    def __init__(self, min, max):
        if min > max:
            raise GenerationError('Invalid interval ' + str(min) + '..' + str(max) + ', minimum greater than maximum.')
        self.min = min
        self.max = max

    def key(self):
        return ('interval', self.min, self.max)

    def varName(self):
        return 'param_domain__' + str(self.min).replace('-', 'm') + '_' + str(self.max).replace('-', 'm')

    def __contains__(self, value):
        return self.min <= value <= self.max

class Enumeration(ParameterDomain):
    """Explicit list of values: integers or register names. Members are
    kept in canonical order, duplicates removed."""
    def __init__(self, values):
        values = sorted(set(values), key = memberKey)
        if not values:
            raise GenerationError('Enumeration domains need at least one member.')
        if len(values) > ENUM_MAX_LENGTH:
            raise DomainTooLarge('Enumeration of ' + str(len(values)) + ' values exceeds the maximal enumeration length of ' + str(ENUM_MAX_LENGTH) + '.')
        self.values = tuple(values)

    def key(self):
        return ('enum',) + self.values

    def varName(self):
        return 'param_domain_enum__' + '_'.join([str(i) for i in self.values])

    def __len__(self):
        return len(self.values)

    def __contains__(self, value):
        return value in self.values

class IntegerWidth(ParameterDomain):
    """All the integers of the given bit width"""
    def __init__(self, bits, signed = True):
        if not bits in (8, 16, 32, 64):
            raise GenerationError('Invalid integer width ' + str(bits) + ', expected 8, 16, 32 or 64.')
        self.bits = bits
        self.signed = signed

    def key(self):
        return ('int', self.bits, self.signed)

    def varName(self):
        if self.signed:
            return 'param_domain_int' + str(self.bits)
        return 'param_domain_uint' + str(self.bits)

################################################################################
# Registry
################################################################################
class ParameterDomainRegistry:
    """Append-only set of the domains referenced by the parameter tables,
    iterated in registration order."""
    def __init__(self):
        self.domains = OrderedDict()

    def register(self, domain):
        if not domain in self.domains:
            self.domains[domain] = domain
        return self.domains[domain]

    def __contains__(self, domain):
        return domain in self.domains

    def __iter__(self):
        return iter(self.domains.values())

    def __len__(self):
        return len(self.domains)

################################################################################
# Default and operand derived domains
################################################################################
def registerClassDomain(registerType):
    if not registerType in x64Defs.REGISTER_CLASSES:
        raise GenerationError('Register type ' + registerType + ' cannot be selected by a parameter.')
    return Enumeration(x64Defs.REGISTER_CLASSES[registerType])

def vsibIndexDomain(indexSize):
    if indexSize == 512:
        return registerClassDomain('zmm')
    return registerClassDomain('xmm')

def defaultDomain(paramName):
    """Domain of a parameter not constrained by any operand"""
    if paramName in x64Defs.FLAG_PARAMETERS:
        return Enumeration([0, 1])
    if paramName in x64Defs.REGISTER_PARAMETERS:
        return registerClassDomain('gp')
    if paramName in ('addr_size', 'scale', 'modrm_reg', 'vex_v', 'legacy_prefix_order'):
        return Interval(0, (1 << x64Defs.PARAMETER_BITSIZES[paramName]) - 1)
    if paramName in ('imm0', 'disp', 'rel'):
        return IntegerWidth(32)
    if paramName == 'imm1':
        return IntegerWidth(8)
    if paramName == 'moffs':
        return IntegerWidth(64)
    raise UnknownFieldKind('No domain for parameter ' + str(paramName))

def operandDomain(operand):
    """Domain implied by the operand bound to a parameter, None when the
    operand does not restrict it."""
    if operand.type in ('reg', 'rm') and operand.registerType is not None:
        return registerClassDomain(operand.registerType)
    if operand.type == 'imm' and operand.immSize is not None:
        return IntegerWidth(operand.immSize)
    if operand.type == 'mem' and operand.parameterName == 'moffs' and operand.memSize is not None:
        return IntegerWidth(operand.memSize)
    return None
