################################################################################
#
# @file     testOperand.py
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

from isagen.operand import Operands
from isagen.errors import UnrecognizedOperandSyntax, UnknownImplicitRegister

class TestOperand(unittest.TestCase):

    def testImplicitRegister(self):
        operands = Operands('RAX:r')
        self.assertEqual(len(operands), 1)
        rax = operands[0]
        self.assertTrue(rax.implicit)
        self.assertEqual(rax.type, 'reg')
        self.assertEqual(rax.access(), ['r'])
        self.assertEqual(rax.register, 'A')
        self.assertEqual(rax.size1(), 64)
        self.assertEqual(rax.parameterName, None)

    def testRm8(self):
        rm = Operands('rm8:rw')[0]
        self.assertEqual(rm.type, 'rm')
        self.assertEqual(rm.access(), ['r', 'w'])
        self.assertEqual(rm.size1(), 8)
        self.assertEqual(rm.size2(), 8)
        self.assertEqual(rm.registerType, 'gp')
        self.assertEqual(rm.parameterName, 'reg0')

    def testImmediatesNumbered(self):
        operands = Operands('imm8:r; imm16:r')
        self.assertEqual([i.parameterName for i in operands], ['imm0', 'imm1'])
        self.assertEqual([i.size1() for i in operands], [8, 16])

    def testIndependentCounters(self):
        operands = Operands('r32:rw; imm8:r; rm32:r')
        self.assertEqual(operands.parameterNames(), ['reg0', 'imm0', 'reg1'])

    def testRelAndMoffs(self):
        self.assertEqual(Operands('rel32:r')[0].parameterName, 'rel')
        moffs = Operands('RAX:w; moffs64:r')[1]
        self.assertEqual(moffs.type, 'mem')
        self.assertEqual(moffs.parameterName, 'moffs')
        self.assertEqual(moffs.size2(), 64)

    def testVectorRm(self):
        rm = Operands('xmm/m128:r')[0]
        self.assertEqual(rm.type, 'rm')
        self.assertEqual(rm.registerType, 'xmm')
        self.assertEqual(rm.size1(), 128)
        self.assertEqual(rm.size2(), 128)
        self.assertEqual(rm.wordType1(), 'dqw')

    def testMemoryHasNoParameter(self):
        mem = Operands('m32:r')[0]
        self.assertEqual(mem.type, 'mem')
        self.assertEqual(mem.parameterName, None)
        self.assertEqual(mem.size2(), 32)

    def testVsib(self):
        vsib = Operands('vm32x32:r')[0]
        self.assertEqual(vsib.type, 'vsib')
        self.assertEqual(vsib.size1(), 128)
        self.assertEqual(vsib.size2(), 32)

    def testImplicitMemoryAndImmediate(self):
        operands = Operands('[RBX + AL]:r; 1:r')
        self.assertEqual(operands[0].type, 'mem')
        self.assertEqual(operands[0].register, 'B')
        self.assertEqual(operands[1].type, 'imm')
        self.assertEqual(operands[1].imm, 1)
        self.assertEqual(operands.parameterNames(), [])

    def testHighByteWordType(self):
        self.assertEqual(Operands('AH:r')[0].wordType1(), 'hb')

    def testStatusRegisterOperand(self):
        rflags = Operands('r32:w; ZF:w')[1]
        self.assertEqual(rflags.type, 'flags')
        self.assertEqual(rflags.registerType, 'rflags')
        self.assertTrue(rflags.implicit)

    def testWrittenRange(self):
        xmm = Operands('xmm:w[0..31]')[0]
        self.assertEqual(xmm.accessedBits['w'], (0, 31))

    def testUnrecognizedOperand(self):
        self.assertRaises(UnrecognizedOperandSyntax, Operands, 'bogus123:r')

    def testInvalidRegisterSize(self):
        self.assertRaises(UnrecognizedOperandSyntax, Operands, 'r12:r')

    def testUnknownImplicitRegister(self):
        self.assertRaises(UnknownImplicitRegister, Operands, 'FOO:r')
