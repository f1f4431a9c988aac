################################################################################
#
# @file     errors.py
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

################################################################################
# Errors raised while building and translating the ISA
################################################################################
class GenerationError(Exception):
    """Base class of all the errors raised by the generator. Any of them
    aborts the whole run since a partial output would contain dangling
    references. The instruction being processed, when known, is kept in
    the instruction attribute and appended to the message."""
    def __init__(self, message, instruction = None):
        self.instruction = instruction
        if instruction is not None:
            message = message + ' (instruction ' + str(instruction) + ')'
        Exception.__init__(self, message)

class MalformedSpec(GenerationError):
    """The operand specification string does not parse."""
    pass

class UnrecognizedOperandSyntax(GenerationError):
    """An explicit operand name matches none of the known operand forms."""
    pass

class UnknownImplicitRegister(GenerationError):
    """An implicit operand names a register which is not modelled."""
    pass

class UnknownFieldKind(GenerationError):
    """A parameter has no entry in the parameter kind table."""
    pass

class DomainTooLarge(GenerationError):
    """An enumerated domain has too many members, or a value range does not
    fit the field holding it."""
    pass

class ParameterNotFound(GenerationError):
    """An operand refers to a parameter missing from its instruction's
    parameter list."""
    pass

class UnhandledVariant(GenerationError):
    pass

class FieldSetTooWide(GenerationError):
    """The packed parameter fields exceed the word budget of the structure."""
    pass
