################################################################################
#
# @file     encoding.py
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

from isagen.errors import GenerationError

################################################################################
# Globals and Helpers
################################################################################
WRITE_SIZES = (8, 16, 32, 64)

def toTuple(actions):
    if isinstance(actions, (list, tuple)):
        return tuple(actions)
    return (actions,)

class Node:
    """Base of expressions and actions. Nodes are immutable and compare by
    content, so that equal encoding fragments of different instructions
    map to the same shared routine."""
    def key(self):
        raise NotImplementedError()

    def __eq__(self, other):
        return type(self) == type(other) and self.key() == other.key()

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((type(self).__name__,) + self.key())

    def __repr__(self):
        return type(self).__name__ + repr(self.key())

################################################################################
# Expressions
################################################################################
class Literal(Node):
    def __init__(self, value):
        self.value = value

    def key(self):
        return (type(self.value).__name__, self.value)

class Param(Node):
    """Value of an encoding parameter"""
    def __init__(self, name):
        self.name = name

    def key(self):
        return (self.name,)

class IsSet(Node):
    """Presence flag of a parameter which may be left unspecified"""
    def __init__(self, name):
        self.name = name

    def key(self):
        return (self.name,)

class UnaryOp(Node):
    """Unary C operator; an identifier is applied as a function."""
    def __init__(self, op, operand):
        self.op = op
        self.operand = toExpr(operand)

    def key(self):
        return (self.op, self.operand)

class BinaryOp(Node):
    def __init__(self, op, lhs, rhs):
        self.op = op
        self.lhs = toExpr(lhs)
        self.rhs = toExpr(rhs)

    def key(self):
        return (self.op, self.lhs, self.rhs)

def toExpr(value):
    if isinstance(value, Node):
        return value
    return Literal(value)

################################################################################
# Actions
################################################################################
class Write(Node):
    """Appends bytes to the instruction. The value is either a single
    expression written with the given size (8, 16, 32 or 64 bits) or a list
    of expressions packed most significant first, each masked to the
    corresponding width of the size list."""
    def __init__(self, value, size):
        if isinstance(value, (list, tuple)):
            if not isinstance(size, (list, tuple)) or len(size) != len(value):
                raise GenerationError('Packed write needs one width for each value.')
            self.value = tuple([toExpr(i) for i in value])
            self.size = tuple(size)
            self.totalSize = sum(self.size)
        else:
            self.value = toExpr(value)
            self.size = size
            self.totalSize = size
        if not self.totalSize in WRITE_SIZES:
            raise GenerationError('Invalid write size ' + str(self.totalSize) + ', expected one of ' + str(WRITE_SIZES) + '.')

    def packed(self):
        return isinstance(self.value, tuple)

    def key(self):
        return (self.value, self.size)

class If(Node):
    def __init__(self, condition, actions, elseActions = ()):
        self.condition = toExpr(condition)
        self.actions = toTuple(actions)
        self.elseActions = toTuple(elseActions)

    def key(self):
        return (self.condition, self.actions, self.elseActions)

class Error(Node):
    """Aborts the encoding: the parameter combination cannot be encoded"""
    def __init__(self, message):
        self.message = message

    def key(self):
        return (self.message,)

class Routine(Node):
    """A shared sub-routine. Its identity is given by its actions only, the
    name just documents the generated code."""
    def __init__(self, name, actions):
        self.name = name
        self.actions = toTuple(actions)

    def key(self):
        return self.actions

class Call(Node):
    def __init__(self, routine):
        self.routine = routine

    def key(self):
        return (self.routine,)

class UnorderedWrites(Node):
    """Actions whose relative order is free (e.g. legacy prefixes). The
    order actually emitted is selected by param, which indexes the table of
    all the permutations of the actions."""
    def __init__(self, writes, param = 'legacy_prefix_order'):
        self.writes = toTuple(writes)
        if not self.writes:
            raise GenerationError('Unordered writes need at least one action.')
        self.param = param

    def key(self):
        return (self.writes, self.param)
