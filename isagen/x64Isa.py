################################################################################
#
# @file     x64Isa.py
# @brief    This file is part of the ISAGEN instruction set description module.
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

from isagen import isa
from isagen.encoding import Param, IsSet, UnaryOp, BinaryOp, Write, If, Error, Routine, Call, UnorderedWrites

################################################################################
# Globals and Helpers
################################################################################
MEMORY_EXCEPTIONS = ['gp', 'ss', 'pf', 'ac']
SSE_EXCEPTIONS = ['gp', 'ss', 'pf', 'ud', 'nm', 'xm']
ARITH_FLAGS = 'OF:w; SF:w; ZF:w; AF:w; CF:w; PF:w'

def regNum(paramName):
    return UnaryOp('evoasm_x64_reg_num', Param(paramName))

def low3(paramName):
    return BinaryOp('&', regNum(paramName), 0x7)

def high1(paramName):
    return BinaryOp('>>', regNum(paramName), 3)

def anyOf(exprs):
    expr = exprs[0]
    for i in exprs[1:]:
        expr = BinaryOp('||', expr, i)
    return expr

def allOf(exprs):
    expr = exprs[0]
    for i in exprs[1:]:
        expr = BinaryOp('&&', expr, i)
    return expr

def regField(field):
    """Value of the ModRM reg field: a register parameter or an opcode
    extension"""
    if isinstance(field, str):
        return low3(field)
    return field

def opcode(*values):
    return [Write(i, 8) for i in values]

lockPrefix = If(Param('lock'), Write(0xF0, 8))
opSizePrefix = Write(0x66, 8)

################################################################################
# Shared routines
################################################################################
def rexRoutine(w, field = None, rmParam = None):
    """REX prefix of an instruction with a ModRM byte. Without W the prefix
    is only emitted when an extension bit is needed or it is forced."""
    if isinstance(field, str):
        rBit = high1(field)
    else:
        rBit = 0
    xBit = allOf([IsSet('reg_index'), high1('reg_index')])
    memoryRex = Write([4, w, rBit, xBit, high1('reg_base')], [4, 1, 1, 1, 1])
    if w:
        memoryActions = [memoryRex]
    else:
        conds = [Param('force_rex'), xBit, high1('reg_base')]
        if isinstance(field, str):
            conds.insert(1, rBit)
        memoryActions = [If(anyOf(conds), memoryRex)]
    registerActions = []
    if rmParam is not None:
        # X is ignored in the register form.
        registerRex = Write([4, w, rBit, Param('rex_x'), high1(rmParam)], [4, 1, 1, 1, 1])
        if w:
            registerActions = [registerRex]
        else:
            conds = [Param('force_rex'), high1(rmParam)]
            if isinstance(field, str):
                conds.insert(1, rBit)
            registerActions = [If(anyOf(conds), registerRex)]
    return Routine('rex', [If(IsSet('reg_base'), memoryActions, registerActions)])

def opcodeRexRoutine(w, paramName):
    """REX prefix of an instruction encoding the register in the opcode"""
    rex = Write([4, w, 0, 0, high1(paramName)], [4, 1, 1, 1, 1])
    if w:
        return Routine('rex_opcode_reg', [rex])
    return Routine('rex_opcode_reg', [If(anyOf([Param('force_rex'), high1(paramName)]), rex)])

def memoryModrm(reg, vsib = False):
    """ModRM, SIB and displacement of a memory operand"""
    def forms(mod, dispActions):
        sib = [Write([mod, reg, 4], [2, 3, 3]), Write([Param('scale'), low3('reg_index'), low3('reg_base')], [2, 3, 3])]
        if vsib:
            return sib + dispActions
        baseSib = [Write([mod, reg, 4], [2, 3, 3]), Write([0, 4, low3('reg_base')], [2, 3, 3])]
        direct = [Write([mod, reg, low3('reg_base')], [2, 3, 3])]
        # SP and R12 bases always need a SIB byte.
        needsSib = anyOf([BinaryOp('==', low3('reg_base'), 4), Param('force_sib')])
        return [If(IsSet('reg_index'), sib, If(needsSib, baseSib, direct))] + dispActions

    withDisp = forms(2, [Write(Param('disp'), 32)])
    withoutDisp = [If(BinaryOp('==', low3('reg_base'), 5), Error('base register BP or R13 needs a displacement'))] + forms(0, [])
    return [If(IsSet('disp'), withDisp, withoutDisp)]

def modrmRoutine(field, rmParam = None, vsib = False):
    reg = regField(field)
    if rmParam is None:
        registerActions = [Error('memory operand needs a base register')]
    else:
        registerActions = [Write([3, reg, low3(rmParam)], [2, 3, 3])]
    return Routine('modrm', [If(IsSet('reg_base'), memoryModrm(reg, vsib), registerActions)])

def vexRoutine(regParam, vvvvParam, mmmmm, pp, w = 0, l = 0):
    """Three byte VEX prefix of an instruction with a memory operand"""
    byte1 = Write([UnaryOp('!', high1(regParam)), UnaryOp('!', allOf([IsSet('reg_index'), high1('reg_index')])), UnaryOp('!', high1('reg_base')), mmmmm], [1, 1, 1, 5])
    byte2 = Write([w, BinaryOp('^', regNum(vvvvParam), 0xF), l, pp], [1, 4, 1, 2])
    return Routine('vex', [Write(0xC4, 8), byte1, byte2])

def modrmEncoding(prefixes, w, opcodes, field, rmParam = None, immediates = None):
    """Encoding of the usual legacy prefixes, REX, opcode, ModRM form"""
    if immediates is None:
        immediates = []
    return prefixes + [Call(rexRoutine(w, field, rmParam))] + opcode(*opcodes) + [Call(modrmRoutine(field, rmParam))] + immediates

################################################################################
# Instruction set
################################################################################
def buildIsa():
    """Returns the described subset of the x64 instruction set"""
    x64Isa = isa.ISA('x64')

    x64Isa.addInstruction(isa.Instruction('add_r32_rm32', 'add', 'r32:rw; rm32:r; ' + ARITH_FLAGS,
        modrmEncoding([], 0, [0x03], 'reg0', 'reg1'),
        exceptions = MEMORY_EXCEPTIONS))

    x64Isa.addInstruction(isa.Instruction('add_rm64_imm32', 'add', 'rm64:rw; imm32:r; ' + ARITH_FLAGS,
        modrmEncoding([lockPrefix], 1, [0x81], 0, 'reg0', [Write(Param('imm0'), 32)]),
        flags = ['rex', 'lock'], exceptions = MEMORY_EXCEPTIONS))

    x64Isa.addInstruction(isa.Instruction('adc_rm16_r16', 'adc', 'rm16:rw; r16:r; OF:w; SF:w; ZF:w; AF:w; CF:rw; PF:w',
        modrmEncoding([UnorderedWrites([lockPrefix, opSizePrefix])], 0, [0x11], 'reg1', 'reg0'),
        flags = ['lock'], exceptions = MEMORY_EXCEPTIONS))

    x64Isa.addInstruction(isa.Instruction('sub_rm16_imm16', 'sub', 'rm16:rw; imm16:r; ' + ARITH_FLAGS,
        modrmEncoding([UnorderedWrites([lockPrefix, opSizePrefix])], 0, [0x81], 5, 'reg0', [Write(Param('imm0'), 16)]),
        flags = ['lock'], exceptions = MEMORY_EXCEPTIONS))

    x64Isa.addInstruction(isa.Instruction('cmpxchg_rm32_r32', 'cmpxchg', 'rm32:rc; r32:r; EAX:rc; ' + ARITH_FLAGS,
        modrmEncoding([lockPrefix], 0, [0x0F, 0xB1], 'reg1', 'reg0'),
        flags = ['lock'], exceptions = MEMORY_EXCEPTIONS))

    x64Isa.addInstruction(isa.Instruction('popcnt_r64_rm64', 'popcnt', 'r64:w; rm64:r; OF:w; SF:w; ZF:w; AF:w; CF:w; PF:w',
        modrmEncoding([Write(0xF3, 8)], 1, [0x0F, 0xB8], 'reg0', 'reg1'),
        flags = ['rex'], features = ['popcnt'], exceptions = MEMORY_EXCEPTIONS + ['ud']))

    x64Isa.addInstruction(isa.Instruction('cmovz_r32_rm32', 'cmovz', 'r32:c; rm32:r; ZF:r',
        modrmEncoding([], 0, [0x0F, 0x44], 'reg0', 'reg1'),
        features = ['cmov'], exceptions = MEMORY_EXCEPTIONS))

    x64Isa.addInstruction(isa.Instruction('mov_r64_imm64', 'mov', 'r64:w; imm64:r',
        [Call(opcodeRexRoutine(1, 'reg0')), Write(BinaryOp('+', 0xB8, low3('reg0')), 8), Write(Param('imm0'), 64)],
        flags = ['rex']))

    x64Isa.addInstruction(isa.Instruction('mov_rax_moffs64', 'mov', 'RAX:w; moffs64:r',
        opcode(0x48, 0xA1) + [Write(Param('moffs'), 64)],
        flags = ['rex'], exceptions = MEMORY_EXCEPTIONS))

    highByte = [
        If(BinaryOp('>', regNum('reg0'), 3), Error('only the first four general purpose registers have a high byte')),
        Write(BinaryOp('+', 0xB4, low3('reg0')), 8),
    ]
    lowByte = [Call(opcodeRexRoutine(0, 'reg0')), Write(BinaryOp('+', 0xB0, low3('reg0')), 8)]
    x64Isa.addInstruction(isa.Instruction('mov_r8_imm8', 'mov', 'r8:w; imm8:r',
        [If(Param('reg0_high_byte'), highByte, lowByte), Write(Param('imm0'), 8)]))

    x64Isa.addInstruction(isa.Instruction('push_r64', 'push', 'r64:r; RSP:rw; [RSP]:w',
        [Call(opcodeRexRoutine(0, 'reg0')), Write(BinaryOp('+', 0x50, low3('reg0')), 8)],
        flags = ['sp'], exceptions = ['ss', 'pf', 'ac']))

    x64Isa.addInstruction(isa.Instruction('pushfq', 'pushfq', 'RFLAGS:r; RSP:rw; [RSP]:w',
        opcode(0x9C),
        flags = ['sp'], exceptions = ['ss', 'pf', 'ac']))

    x64Isa.addInstruction(isa.Instruction('enter_imm16_imm8', 'enter', 'imm16:r; imm8:r; RSP:rw; RBP:rw',
        opcode(0xC8) + [Write(Param('imm0'), 16), Write(Param('imm1'), 8)],
        flags = ['sp'], exceptions = ['ss', 'pf', 'ac']))

    x64Isa.addInstruction(isa.Instruction('shl_rm32_cl', 'shl', 'rm32:rw; CL:r; OF:u; SF:w; ZF:w; AF:u; CF:w; PF:w',
        modrmEncoding([], 0, [0xD3], 4, 'reg0'),
        exceptions = MEMORY_EXCEPTIONS))

    x64Isa.addInstruction(isa.Instruction('shl_rm32_1', 'shl', 'rm32:rw; 1:r; OF:w; SF:w; ZF:w; AF:u; CF:w; PF:w',
        modrmEncoding([], 0, [0xD1], 4, 'reg0'),
        exceptions = MEMORY_EXCEPTIONS))

    x64Isa.addInstruction(isa.Instruction('xlat', 'xlatb', 'AL:rw; [RBX + AL]:r',
        opcode(0x48, 0xD7),
        flags = ['rex'], exceptions = MEMORY_EXCEPTIONS))

    x64Isa.addInstruction(isa.Instruction('jmp_rel32', 'jmp', 'rel32:r; RIP:rw',
        opcode(0xE9) + [Write(Param('rel'), 32)],
        flags = ['branch'], exceptions = ['gp']))

    x64Isa.addInstruction(isa.Instruction('ldmxcsr_m32', 'ldmxcsr', 'm32:r; MXCSR:w',
        modrmEncoding([], 0, [0x0F, 0xAE], 2),
        features = ['sse'], exceptions = MEMORY_EXCEPTIONS + ['ud', 'nm']))

    x64Isa.addInstruction(isa.Instruction('addps_xmm_xmmm128', 'addps', 'xmm:rw; xmm/m128:r; IE:w; DE:w; OE:w; UE:w; PE:w',
        modrmEncoding([], 0, [0x0F, 0x58], 'reg0', 'reg1'),
        features = ['sse'], exceptions = SSE_EXCEPTIONS))

    x64Isa.addInstruction(isa.Instruction('vpgatherdd_xmm_vm32x_xmm', 'vpgatherdd', 'xmm:rc; vm32x32:r; xmm:rw',
        [Call(vexRoutine('reg0', 'reg1', 0b00010, 0b01))] + opcode(0x90) + [Call(modrmRoutine('reg0', None, vsib = True))],
        flags = ['vex'], features = ['avx2'], exceptions = ['gp', 'ss', 'pf', 'ud', 'nm']))

    x64Isa.addInstruction(isa.Instruction('movss_xmm_xmmm32', 'movss', 'xmm:w[0..31]; xmm/m32:r',
        modrmEncoding([Write(0xF3, 8)], 0, [0x0F, 0x10], 'reg0', 'reg1'),
        features = ['sse'], exceptions = SSE_EXCEPTIONS))

    return x64Isa
