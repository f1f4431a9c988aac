################################################################################
#
# @file     x64Defs.py
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

################################################################################
# Registers
################################################################################
# Canonical register identifiers grouped by register class; the position in
# REGISTER_NAMES is the emitted register id.
REGISTERS = OrderedDict([
    ('gp', ['A', 'C', 'D', 'B', 'SP', 'BP', 'SI', 'DI', 'R8', 'R9', 'R10', 'R11', 'R12', 'R13', 'R14', 'R15']),
    ('ip', ['IP']),
    ('mm', ['MM' + str(i) for i in range(8)]),
    ('xmm', ['XMM' + str(i) for i in range(16)]),
    ('zmm', ['ZMM' + str(i) for i in range(16, 32)]),
])

REGISTER_NAMES = []
for regClass in REGISTERS.values():
    REGISTER_NAMES += regClass
REGISTER_IDS = dict([(name, regId) for regId, name in enumerate(REGISTER_NAMES)])

# Registers selectable by operands of each class; zmm operands also
# reach the lower sixteen vector registers.
REGISTER_CLASSES = {
    'gp': REGISTERS['gp'],
    'mm': REGISTERS['mm'],
    'xmm': REGISTERS['xmm'],
    'zmm': REGISTERS['xmm'] + REGISTERS['zmm'],
}

REGISTER_TYPES = ['gp', 'rflags', 'ip', 'mxcsr', 'mm', 'xmm', 'zmm']

# name -> (register type, canonical register, width, word type)
IMPLICIT_REGISTERS = {
    'RAX': ('gp', 'A', 64, None),
    'EAX': ('gp', 'A', 32, None),
    'AX': ('gp', 'A', 16, None),
    'AL': ('gp', 'A', 8, 'lb'),
    'AH': ('gp', 'A', 8, 'hb'),
    'RCX': ('gp', 'C', 64, None),
    'ECX': ('gp', 'C', 32, None),
    'CX': ('gp', 'C', 16, None),
    'CL': ('gp', 'C', 8, None),
    'RDX': ('gp', 'D', 64, None),
    'EDX': ('gp', 'D', 32, None),
    'DX': ('gp', 'D', 16, None),
    'RBX': ('gp', 'B', 64, None),
    'EBX': ('gp', 'B', 32, None),
    'RSP': ('gp', 'SP', 64, None),
    'SP': ('gp', 'SP', 16, None),
    'RBP': ('gp', 'BP', 64, None),
    'BP': ('gp', 'BP', 16, None),
    'RSI': ('gp', 'SI', 64, None),
    'ESI': ('gp', 'SI', 32, None),
    'SI': ('gp', 'SI', 16, None),
    'SIL': ('gp', 'SI', 8, None),
    'RDI': ('gp', 'DI', 64, None),
    'EDI': ('gp', 'DI', 32, None),
    'DI': ('gp', 'DI', 16, None),
    'DIL': ('gp', 'DI', 8, None),
    'RIP': ('ip', 'IP', 64, None),
    'XMM0': ('xmm', 'XMM0', 128, None),
    'RFLAGS': ('rflags', 'RFLAGS', 64, None),
    'MXCSR': ('mxcsr', 'MXCSR', 32, None),
}

################################################################################
# Status register bits
################################################################################
RFLAGS_BITS = ['OF', 'SF', 'ZF', 'AF', 'CF', 'PF', 'DF', 'IF', 'TF', 'NT', 'RF', 'AC', 'ID', 'IOPL', 'VM', 'VIF', 'VIP']
IGNORED_RFLAGS = ['IF', 'TF', 'NT', 'RF', 'AC', 'ID', 'IOPL', 'VM', 'VIF', 'VIP']
MXCSR_BITS = ['IE', 'DE', 'ZE', 'OE', 'UE', 'PE', 'DAZ', 'IM', 'DM', 'ZM', 'OM', 'UM', 'PM', 'RC', 'FZ']
IGNORED_MXCSR = ['IM', 'DM', 'ZM', 'OM', 'UM', 'PM', 'RC', 'DAZ', 'FZ']

################################################################################
# Operands and instructions
################################################################################
OPERAND_TYPES = ['reg', 'rm', 'mem', 'imm', 'vsib', 'flags']
OPERAND_SIZES = [1, 8, 16, 32, 64, 128, 256, 512]

INST_FLAGS = ['sp', 'rex', 'vex', 'lock', 'branch']

FEATURES = ['cmov', 'sse', 'sse2', 'sse3', 'ssse3', 'sse4_1', 'sse4_2', 'avx', 'avx2', 'fma', 'popcnt', 'lzcnt', 'bmi1', 'bmi2', 'adx', 'rdrand']

EXCEPTIONS = ['de', 'db', 'bp', 'of', 'br', 'ud', 'nm', 'df', 'ts', 'np', 'ss', 'gp', 'pf', 'mf', 'ac', 'mc', 'xm', 've']

################################################################################
# Parameters
################################################################################
def enumBitsize(nValues):
    """Number of bits needed to store nValues distinct values."""
    return max(1, (nValues - 1).bit_length())

# One extra value for the "no register" id.
REG_ID_BITSIZE = enumBitsize(len(REGISTER_NAMES) + 1)

PARAMETERS = ['reg0', 'reg1', 'reg2', 'reg3', 'reg4', 'imm0', 'imm1', 'rel', 'moffs', 'disp',
              'reg_base', 'reg_index', 'scale', 'addr_size', 'modrm_reg', 'vex_v', 'vex_l',
              'rex_b', 'rex_r', 'rex_x', 'rex_w', 'force_rex', 'lock', 'force_sib', 'force_disp32',
              'force_long_vex', 'reg0_high_byte', 'reg1_high_byte', 'legacy_prefix_order']

BASIC_PARAMETERS = ['reg0', 'reg1', 'reg2', 'reg3', 'imm0', 'rel', 'moffs', 'reg0_high_byte', 'reg1_high_byte']

FLAG_PARAMETERS = ['rex_b', 'rex_r', 'rex_x', 'rex_w', 'vex_l', 'force_rex', 'lock', 'force_sib',
                   'force_disp32', 'force_long_vex', 'reg0_high_byte', 'reg1_high_byte']

REGISTER_PARAMETERS = ['reg0', 'reg1', 'reg2', 'reg3', 'reg4', 'reg_base', 'reg_index']

PARAMETER_BITSIZES = {
    'addr_size': 1,
    'scale': 2,
    'modrm_reg': 3,
    'legacy_prefix_order': 3,
    'vex_v': 4,
    'imm1': 8,
    'disp': 32,
    'imm0': 64,
    'moffs': 64,
    'rel': 64,
}
for paramName in FLAG_PARAMETERS:
    PARAMETER_BITSIZES[paramName] = 1
for paramName in REGISTER_PARAMETERS:
    PARAMETER_BITSIZES[paramName] = REG_ID_BITSIZE

BASIC_PARAMETER_BITSIZES = {
    'imm0': 32,
    'moffs': 32,
    'rel': 32,
}

PARAMETER_TYPES = ['bool', 'uint1', 'addr_size', 'scale', 'int3', 'int4', 'reg', 'int8', 'int32', 'int64']

PARAMETER_KIND_TYPES = {
    'force_rex': 'bool',
    'lock': 'bool',
    'force_sib': 'bool',
    'force_disp32': 'bool',
    'force_long_vex': 'bool',
    'reg0_high_byte': 'bool',
    'reg1_high_byte': 'bool',
    'rex_b': 'uint1',
    'rex_r': 'uint1',
    'rex_x': 'uint1',
    'rex_w': 'uint1',
    'vex_l': 'uint1',
    'addr_size': 'addr_size',
    'scale': 'scale',
    'modrm_reg': 'int3',
    'legacy_prefix_order': 'int3',
    'vex_v': 'int4',
    'imm1': 'int8',
    'disp': 'int32',
    'imm0': 'int64',
    'moffs': 'int64',
    'rel': 'int64',
}
for paramName in REGISTER_PARAMETERS:
    PARAMETER_KIND_TYPES[paramName] = 'reg'

BASIC_PARAMETER_KIND_TYPES = {
    'imm0': 'int32',
    'moffs': 'int32',
    'rel': 'int32',
}

SIGNED_PARAMETERS = ['disp', 'rel', 'imm0', 'imm1', 'moffs']

# Parameters an instruction may leave unspecified; each one is paired with
# a presence flag.
UNDEFINEDABLE_PARAMETERS = ['addr_size', 'disp', 'legacy_prefix_order', 'reg_base', 'reg_index',
                            'rex_b', 'rex_r', 'rex_w', 'rex_x', 'scale', 'vex_l', 'vex_v']

# Fields which are never meaningful at the same time share storage.
UNIONS = [['imm0', 'moffs', 'rel'], ['imm1', 'disp']]
BASIC_UNIONS = [['imm0', 'moffs', 'rel']]
