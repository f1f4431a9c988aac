################################################################################
#
# @file     testSimpleDecls.py
# @brief    This file is part of the ISAGEN C code generator testsuite.
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

import io
import unittest

import c_writer

class TestSimpleDecls(unittest.TestCase):

    def setUp(self):
        self.buf = io.StringIO()
        self.writer = c_writer.CodeWriter(self.buf, indentSize = 2, lineWidth = 80)

    def writtenLines(self):
        self.writer.flush()
        return self.buf.getvalue().split('\n')[:-1]

    def testPointerType(self):
        ctxType = c_writer.Type('evoasm_x64_enc_ctx_t').makePointer()
        self.assertEqual(str(ctxType), 'evoasm_x64_enc_ctx_t *')
        self.assertEqual(str(c_writer.Parameter('ctx', ctxType)), 'evoasm_x64_enc_ctx_t *ctx')
        self.assertEqual(str(c_writer.charPtrType), 'const char *')

    def testIntTypeForBits(self):
        self.assertIs(c_writer.intTypeForBits(3, False), c_writer.uint8Type)
        self.assertIs(c_writer.intTypeForBits(16, True), c_writer.int16Type)
        self.assertIs(c_writer.intTypeForBits(33, True), c_writer.int64Type)
        self.assertRaises(Exception, c_writer.intTypeForBits, 65, False)

    def testStaticTable(self):
        var = c_writer.Variable('permutations2', c_writer.uint8Type.makeConst(), static = True, initValue = '{\n{0, 1},\n{1, 0},\n}', dimensions = [2, 2])
        var.writeImplementation(self.writer)
        lines = self.writtenLines()
        self.assertEqual(lines, ['static const uint8_t permutations2[2][2] = {', '  {0, 1},', '  {1, 0},', '};'])

    def testStaticVariableNotDeclared(self):
        var = c_writer.Variable('x', c_writer.intType, static = True)
        var.writeDeclaration(self.writer)
        self.assertEqual(self.writtenLines(), [])

    def testExternDeclaration(self):
        var = c_writer.Variable('names', c_writer.charPtrType, dimensions = [''])
        var.writeDeclaration(self.writer)
        self.assertEqual(self.writtenLines(), ['extern const char *names[];'])

    def testTypedefEnum(self):
        enum = c_writer.Enum('evoasm_x64_reg_type_t', [('EVOASM_X64_REG_TYPE_GP', ''), ('EVOASM_X64_REG_TYPE_XMM', '')], typedef = True)
        enum.addValue('EVOASM_X64_REG_TYPE_NONE', 7)
        enum.writeDeclaration(self.writer)
        lines = self.writtenLines()
        self.assertEqual(lines[0], 'typedef enum {')
        self.assertEqual(lines[1], '  EVOASM_X64_REG_TYPE_GP,')
        self.assertEqual(lines[3], '  EVOASM_X64_REG_TYPE_NONE = 7')
        self.assertEqual(lines[4], '} evoasm_x64_reg_type_t;')

    def testEmptyEnum(self):
        enum = c_writer.Enum('empty', [])
        self.assertRaises(Exception, enum.writeDeclaration, self.writer)

    def testStaticFunction(self):
        ctx = c_writer.Parameter('ctx', c_writer.Type('evoasm_x64_enc_ctx_t').makePointer())
        func = c_writer.Function('evoasm_x64_func_0', c_writer.Code('return 1;'), c_writer.intType, [ctx], static = True)
        func.writeDeclaration(self.writer)
        func.writeImplementation(self.writer)
        lines = self.writtenLines()
        self.assertEqual(lines, ['static int evoasm_x64_func_0(evoasm_x64_enc_ctx_t *ctx);', 'static int evoasm_x64_func_0(evoasm_x64_enc_ctx_t *ctx) {', '  return 1;', '} // evoasm_x64_func_0()'])

    def testExportedFunctionPrototype(self):
        func = c_writer.Function('evoasm_x64_add', c_writer.Code('return 1;'), c_writer.intType, [c_writer.Parameter('order', c_writer.uintType)])
        func.writeDeclaration(self.writer)
        self.assertEqual(self.writtenLines(), ['int evoasm_x64_add(unsigned order);'])

    def testInlineFunction(self):
        func = c_writer.Function('get', c_writer.Code('return 0;'), c_writer.uint8Type, static = True, inline = True)
        func.writeImplementation(self.writer)
        self.assertEqual(self.writtenLines(), [])
        func.writeDeclaration(self.writer)
        lines = self.writtenLines()
        self.assertEqual(lines[0], 'static inline uint8_t get() {')
        self.assertEqual(func.getIncludes(), ['stdint.h'])

    def testPackedBitField(self):
        union = c_writer.Union('', [c_writer.BitFieldMember('imm0', c_writer.int64Type, 64), c_writer.BitFieldMember('disp', c_writer.int32Type, 32)], packMacro = 'evoasm_packed')
        bitField = c_writer.BitField('evoasm_x64_params_t', [c_writer.BitFieldMember('lock', c_writer.uint8Type, 1), union])
        bitField.writeDeclaration(self.writer)
        lines = self.writtenLines()
        self.assertEqual(lines, ['typedef struct {', '  uint8_t lock : 1;', '  evoasm_packed(union {', '    int64_t imm0 : 64;', '    int32_t disp : 32;', '  });', '} evoasm_x64_params_t;'])
        self.assertEqual(bitField.getIncludes(), ['stdint.h'])

    def testDocString(self):
        var = c_writer.Variable('x', c_writer.intType)
        var.addDocString('Number of things')
        var.writeImplementation(self.writer)
        self.assertEqual(self.writtenLines(), ['/* Number of things */', 'int x;'])
