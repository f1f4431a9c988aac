################################################################################
#
# @file     testOperandSpec.py
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

from isagen import operandSpec
from isagen.errors import MalformedSpec

class TestOperandSpec(unittest.TestCase):

    def testSingleOperand(self):
        specs = operandSpec.parseOperandsSpec('RAX:r')
        self.assertEqual(len(specs), 1)
        self.assertEqual(specs[0].name, 'RAX')
        self.assertEqual(specs[0].flags, ['r'])
        self.assertEqual(specs[0].accessedBits, {})

    def testWhitespaceAndEmptySegments(self):
        specs = operandSpec.parseOperandsSpec(' rm8 : rw ;; imm8:r; ')
        self.assertEqual([i.name for i in specs], ['rm8', 'imm8'])
        self.assertEqual(specs[0].flags, ['r', 'w'])

    def testBitRange(self):
        specs = operandSpec.parseOperandsSpec('xmm:rw[0..31]')
        self.assertEqual(specs[0].flags, ['r', 'w'])
        self.assertEqual(specs[0].accessedBits, {'w': (0, 31)})

    def testMissingSeparator(self):
        self.assertRaises(MalformedSpec, operandSpec.parseOperandsSpec, 'RAX r')

    def testMissingName(self):
        self.assertRaises(MalformedSpec, operandSpec.parseOperandsSpec, ':r')

    def testInvalidFlag(self):
        self.assertRaises(MalformedSpec, operandSpec.parseOperandsSpec, 'RAX:rx')

    def testRepeatedFlag(self):
        self.assertRaises(MalformedSpec, operandSpec.parseOperandsSpec, 'RAX:rr')

    def testInvertedRange(self):
        self.assertRaises(MalformedSpec, operandSpec.parseOperandsSpec, 'xmm:w[31..0]')

    def testErrorNamesInstruction(self):
        try:
            operandSpec.parseOperandsSpec('RAX r', 'add_r32_rm32')
        except MalformedSpec as e:
            self.assertEqual(e.instruction, 'add_r32_rm32')
            self.assertTrue('add_r32_rm32' in str(e))
        else:
            self.fail('MalformedSpec not raised')

    def testStatusBitsCoalesced(self):
        specs = operandSpec.parseOperands('r32:rw; OF:w; CF:r; AF:u; TF:w')
        self.assertEqual([i.name for i in specs], ['r32', 'RFLAGS'])
        rflags = specs[1]
        self.assertEqual(rflags.flags, ['r', 'w', 'u'])
        self.assertEqual(rflags.readFlags, ['CF'])
        self.assertEqual(rflags.writtenFlags, ['OF'])
        self.assertEqual(rflags.undefinedFlags, ['AF'])

    def testStatusRegistersOrder(self):
        specs = operandSpec.parseOperands('IE:w; ZF:r; xmm:rw')
        self.assertEqual([i.name for i in specs], ['xmm', 'RFLAGS', 'MXCSR'])

    def testExplicitStatusRegisterAbsorbsBits(self):
        specs = operandSpec.parseOperands('RFLAGS:r; ZF:w')
        self.assertEqual(len(specs), 1)
        self.assertEqual(specs[0].flags, ['r', 'w'])
        self.assertEqual(specs[0].writtenFlags, ['ZF'])

    def testConditionalWriteCountsAsWritten(self):
        specs = operandSpec.parseOperands('ZF:c')
        self.assertEqual(specs[0].writtenFlags, ['ZF'])
