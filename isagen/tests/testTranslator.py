################################################################################
#
# @file     testTranslator.py
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

import c_writer

from isagen import isa
from isagen.domains import Interval
from isagen.encoding import Literal, Param, IsSet, UnaryOp, BinaryOp, Write, If, Error, Routine, Call, UnorderedWrites
from isagen.errors import GenerationError, UnknownFieldKind, UnhandledVariant, DomainTooLarge
from isagen.translator import EncodingTranslator
from isagen.unitWriter import CUnit

def getTestIsa(encoding = [Write(0x90, 8)]):
    testIsa = isa.ISA()
    testIsa.addInstruction(isa.Instruction('test_r64', 'test', 'r64:rw', encoding))
    return testIsa

class TestEncoding(unittest.TestCase):

    def testStructuralEquality(self):
        self.assertEqual(Write(Param('reg0'), 8), Write(Param('reg0'), 8))
        self.assertNotEqual(Write(Param('reg0'), 8), Write(Param('reg1'), 8))
        self.assertEqual(hash(If(Param('lock'), Write(0xF0, 8))), hash(If(Param('lock'), [Write(0xF0, 8)])))
        self.assertEqual(Routine('rex', [Write(0x48, 8)]), Routine('rex_w', [Write(0x48, 8)]))

    def testLiteralsWrapped(self):
        self.assertEqual(BinaryOp('+', 0xB8, Param('reg0')).lhs, Literal(0xB8))
        self.assertEqual(Write(1, 8).value, Literal(1))

    def testWriteSizes(self):
        self.assertEqual(Write([4, 1, 0, 0, 1], [4, 1, 1, 1, 1]).totalSize, 8)
        self.assertRaises(GenerationError, Write, 1, 12)
        self.assertRaises(GenerationError, Write, [1, 2], [4, 3])
        self.assertRaises(GenerationError, Write, [1, 2], [8])

    def testBooleanLiterals(self):
        self.assertNotEqual(Literal(True), Literal(1))
        self.assertNotEqual(Write(True, 8), Write(1, 8))

    def testEmptyUnorderedWrites(self):
        self.assertRaises(GenerationError, UnorderedWrites, [])

class TestTranslator(unittest.TestCase):

    def setUp(self):
        self.unit = CUnit(getTestIsa())
        self.instr = self.unit.isa['test_r64']
        self.translator = EncodingTranslator(self.unit, self.instr)

    def testSimpleWrite(self):
        self.assertEqual(self.translator.actionsToC([Write(Param('imm0'), 32)]), 'evoasm_x64_enc_ctx_write32(ctx, ctx->params.imm0);\n')
        self.assertEqual(self.translator.parameters, ['imm0'])

    def testPackedWrite(self):
        code = self.translator.actionsToC([Write([3, Param('modrm_reg'), Param('reg0')], [2, 3, 3])])
        self.assertEqual(code, 'evoasm_x64_enc_ctx_write8(ctx, ((0x3 & 0x3) << 6) | ((ctx->params.modrm_reg & 0x7) << 3) | ((ctx->params.reg0 & 0x7) << 0));\n')

    def testParametersInFirstUseOrder(self):
        self.translator.actionsToC([Write(Param('reg1'), 8), Write(Param('reg0'), 8), Write(Param('reg1'), 8)])
        self.assertEqual(self.translator.parameters, ['reg1', 'reg0'])

    def testExpressions(self):
        expr = BinaryOp('|', UnaryOp('evoasm_x64_reg_num', Param('reg0')), UnaryOp('!', IsSet('disp')))
        self.assertEqual(self.translator.exprToC(expr), '(evoasm_x64_reg_num(ctx->params.reg0) | (!ctx->params.disp_set))')
        self.assertEqual(self.translator.exprToC(Literal(True)), 'true')
        self.assertEqual(self.translator.exprToC(Literal(-1)), '-1')

    def testIsSetNeedsPresenceFlag(self):
        self.assertRaises(UnknownFieldKind, self.translator.exprToC, IsSet('lock'))

    def testUnknownParameter(self):
        self.assertRaises(UnknownFieldKind, self.translator.exprToC, Param('bogus'))

    def testUnhandledAction(self):
        self.assertRaises(UnhandledVariant, self.translator.actionsToC, [Routine('rex', [])])
        self.assertRaises(UnhandledVariant, self.translator.exprToC, Write(1, 8))

    def testIfElse(self):
        code = self.translator.actionsToC([If(Param('lock'), Write(0xF0, 8), Write(0x90, 8))])
        self.assertEqual(code, 'if(ctx->params.lock) {\nevoasm_x64_enc_ctx_write8(ctx, 0xf0);\n} else {\nevoasm_x64_enc_ctx_write8(ctx, 0x90);\n}\n')

    def testSingleUnorderedWriteInlined(self):
        code = self.translator.actionsToC([UnorderedWrites([Write(0x66, 8)])])
        self.assertEqual(code, 'evoasm_x64_enc_ctx_write8(ctx, 0x66);\n')
        self.assertEqual(len(self.unit.prefFuncs), 0)

    def testUnorderedWrites(self):
        writes = UnorderedWrites([If(Param('lock'), Write(0xF0, 8)), Write(0x66, 8)])
        code = self.translator.actionsToC([writes])
        self.assertEqual(code, 'if(!evoasm_x64_prefs_0(ctx, ctx->params.legacy_prefix_order)) {\ngoto error;\n}\n')
        self.assertEqual(self.translator.paramDomains['legacy_prefix_order'], Interval(0, 1))
        self.assertEqual(len(self.unit.permutationTables), 1)
        # Equal writes share the function.
        other = EncodingTranslator(self.unit, self.instr)
        other.actionsToC([UnorderedWrites([If(Param('lock'), Write(0xF0, 8)), Write(0x66, 8)])])
        self.assertEqual(len(self.unit.prefFuncs), 1)

    def testPrefixOrderFitsField(self):
        # legacy_prefix_order is three bits wide.
        self.translator.actionsToC([UnorderedWrites([Write(0x66, 8), Write(0x67, 8), Write(0xF2, 8)])])
        self.assertEqual(self.translator.paramDomains['legacy_prefix_order'], Interval(0, 5))

    def testPrefixOrderTooLarge(self):
        writes = UnorderedWrites([Write(0x66, 8), Write(0x67, 8), Write(0xF2, 8), Write(0xF3, 8)])
        self.assertRaises(DomainTooLarge, self.translator.actionsToC, [writes])

    def testNestedUnorderedWrites(self):
        translator = EncodingTranslator(self.unit)
        self.assertRaises(UnhandledVariant, translator.actionsToC, [UnorderedWrites([Write(0x66, 8), Write(0x67, 8)])])

    def testCallsShared(self):
        routine = Routine('rex', [Write([4, 1, 0, 0, 0], [4, 1, 1, 1, 1])])
        code = self.translator.actionsToC([Call(routine)])
        self.assertEqual(code, 'if(!evoasm_x64_func_0(ctx)) {\ngoto error;\n}\n')
        self.translator.actionsToC([Call(Routine('rex_w', routine.actions))])
        self.assertEqual(len(self.unit.calledFuncs), 1)
        self.assertEqual(self.unit.calledFuncs.consumers(routine), [self.translator, self.translator])

    def testMergePropagatesToCallers(self):
        caller = EncodingTranslator(self.unit, self.instr)
        routine = EncodingTranslator(self.unit)
        routine.callers = [caller]
        nested = EncodingTranslator(self.unit)
        nested.callers = [routine]
        nested.mergeParams(['reg_base', 'disp'], {'disp': Interval(0, 1)})
        self.assertEqual(routine.parameters, ['reg_base', 'disp'])
        self.assertEqual(caller.parameters, ['reg_base', 'disp'])
        self.assertEqual(caller.paramDomains['disp'], Interval(0, 1))

    def testMergeWithoutDomains(self):
        self.translator.mergeParams(['reg0'])
        self.translator.mergeParams(['reg1'])
        self.assertEqual(self.translator.parameters, ['reg0', 'reg1'])
        self.assertEqual(len(self.translator.paramDomains), 0)

    def testInstructionFunction(self):
        function = self.translator.emitInstFunc()
        lines = c_writer.renderElements([function]).split('\n')
        self.assertEqual(lines[:4], ['static bool evoasm_x64_test_r64(evoasm_x64_enc_ctx_t *ctx) {', '  evoasm_x64_enc_ctx_write8(ctx, 0x90);', '  return true;', '} // evoasm_x64_test_r64()'])

    def testErrorLabel(self):
        translator = EncodingTranslator(CUnit(getTestIsa([Error('cannot encode')])), None)
        translator.instr = translator.unit.isa['test_r64']
        lines = c_writer.renderElements([translator.emitInstFunc()]).split('\n')
        self.assertEqual(lines[1], '  evoasm_x64_enc_ctx_error(ctx, "cannot encode");')
        self.assertEqual(lines[2], '  goto error;')
        self.assertTrue('  error:' in lines)
        self.assertEqual(lines[-3], '  return false;')

    def testPrefsFunction(self):
        function = EncodingTranslator(self.unit).emitPrefFunc((Write(0x66, 8), Write(0xF2, 8)), 0, 'permutations2')
        lines = c_writer.renderElements([function]).split('\n')
        self.assertEqual(lines[0], 'static bool evoasm_x64_prefs_0(evoasm_x64_enc_ctx_t *ctx, unsigned order) {')
        self.assertEqual(lines[1], '  for(unsigned i = 0; i < 2; i++) {')
        self.assertEqual(lines[2], '    switch(permutations2[order][i]) {')
        self.assertEqual(lines[3], '      case 0: {')
        self.assertEqual(lines[4], '        evoasm_x64_enc_ctx_write8(ctx, 0x66);')
