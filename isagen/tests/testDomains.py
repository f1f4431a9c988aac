################################################################################
#
# @file     testDomains.py
# @brief    This file is part of the ISAGEN instruction set description testsuite.
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

import unittest

from isagen import domains
from isagen.domains import Interval, Enumeration, IntegerWidth, ParameterDomainRegistry
from isagen.errors import GenerationError, DomainTooLarge, UnknownFieldKind
from isagen.operand import Operands

class TestDomains(unittest.TestCase):

    def testStructuralEquality(self):
        self.assertEqual(Interval(0, 5), Interval(0, 5))
        self.assertNotEqual(Interval(0, 5), Interval(0, 6))
        self.assertEqual(Enumeration([8, 1, 4, 2, 4]), Enumeration([1, 2, 4, 8]))
        self.assertEqual(hash(IntegerWidth(32)), hash(IntegerWidth(32)))
        self.assertNotEqual(IntegerWidth(32), IntegerWidth(32, signed = False))

    def testVariableNames(self):
        self.assertEqual(Interval(0, 5).varName(), 'param_domain__0_5')
        self.assertEqual(Interval(-1, 5).varName(), 'param_domain__m1_5')
        self.assertEqual(Interval(-5, -1).varName(), 'param_domain__m5_m1')
        self.assertEqual(Enumeration([8, 4, 2, 1]).varName(), 'param_domain_enum__1_2_4_8')
        self.assertEqual(IntegerWidth(32).varName(), 'param_domain_int32')
        self.assertEqual(IntegerWidth(16, False).varName(), 'param_domain_uint16')

    def testRegisterMembersSortedById(self):
        enum = Enumeration(['B', 'A', 'R8'])
        self.assertEqual(enum.values, ('A', 'B', 'R8'))
        self.assertEqual(enum.varName(), 'param_domain_enum__A_B_R8')

    def testEnumerationLimit(self):
        Enumeration(range(32))
        self.assertRaises(DomainTooLarge, Enumeration, range(33))

    def testEmptyEnumeration(self):
        self.assertRaises(GenerationError, Enumeration, [])

    def testInvalidDomains(self):
        self.assertRaises(GenerationError, Interval, 5, 0)
        self.assertRaises(GenerationError, IntegerWidth, 12)

    def testRegistryCanonicalInstance(self):
        registry = ParameterDomainRegistry()
        first = registry.register(Interval(0, 3))
        second = registry.register(Interval(0, 3))
        self.assertIs(first, second)
        self.assertEqual(len(registry), 1)
        registry.register(Enumeration([0, 1]))
        registry.register(Interval(0, 3))
        self.assertEqual(list(registry), [Interval(0, 3), Enumeration([0, 1])])
        self.assertTrue(Enumeration([1, 0]) in registry)

    def testDefaultDomains(self):
        self.assertEqual(domains.defaultDomain('lock'), Enumeration([0, 1]))
        self.assertEqual(domains.defaultDomain('scale'), Interval(0, 3))
        self.assertEqual(domains.defaultDomain('legacy_prefix_order'), Interval(0, 7))
        self.assertEqual(domains.defaultDomain('disp'), IntegerWidth(32))
        self.assertEqual(domains.defaultDomain('moffs'), IntegerWidth(64))
        self.assertEqual(len(domains.defaultDomain('reg_base')), 16)
        self.assertRaises(UnknownFieldKind, domains.defaultDomain, 'bogus')

    def testOperandDomains(self):
        operands = Operands('xmm:rw; imm8:r; zmm:r; m32:r')
        self.assertEqual(domains.operandDomain(operands[0]), Enumeration(['XMM' + str(i) for i in range(16)]))
        self.assertEqual(domains.operandDomain(operands[1]), IntegerWidth(8))
        self.assertEqual(len(domains.operandDomain(operands[2])), 32)
        self.assertEqual(domains.operandDomain(operands[3]), None)
