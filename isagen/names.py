################################################################################
#
# @file     names.py
# @brief    This file is part of the ISAGEN C code generator module.
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

# Naming conventions of the generated C code.

NAMESPACE = 'evoasm'
ARCH = 'x64'

def symbolToC(name, prefix = [], const = False, type = False):
    cName = '_'.join([NAMESPACE] + [str(i) for i in prefix] + [str(name)])
    if const:
        return cName.upper()
    if type:
        return cName + '_t'
    return cName

def constNameToC(name, prefix):
    return symbolToC(name, prefix, const = True)

def archPrefix(name = None):
    if name is None:
        return [ARCH]
    return [ARCH, name]

def registerNameToC(name):
    return constNameToC(name, archPrefix('reg'))

def regTypeToC(name):
    return constNameToC(name, archPrefix('reg_type'))

def operandTypeToC(name):
    return constNameToC(name, archPrefix('operand_type'))

def operandSizeToC(size):
    return constNameToC(size, archPrefix('operand_size'))

def instNameToC(instr):
    return constNameToC(instr.name, archPrefix('inst'))

def instFlagToC(flag):
    return constNameToC(flag, archPrefix('inst_flag'))

def paramNameToC(name, basic = False):
    if basic:
        return constNameToC(name, archPrefix('basic_param'))
    return constNameToC(name, archPrefix('param'))

def paramTypeToC(name):
    return constNameToC(name, archPrefix('param_type'))

def bitMaskToC(mask):
    """mask is either 'all' or an inclusive (from, to) bit range"""
    if mask == 'all':
        return constNameToC('all', archPrefix('bit_mask'))
    return constNameToC(str(mask[0]) + '_' + str(mask[1]), archPrefix('bit_mask'))

def countConstToC(what):
    return constNameToC('n_' + what, archPrefix())

def enumTypeName(what):
    return symbolToC(what, archPrefix(), type = True)

def instParamsVarName(instr):
    return 'params_' + instr.name

def instMnemVarName(instr):
    return 'name_' + instr.name

def instOperandsVarName(instr):
    return 'operands_' + instr.name

def instsVarName():
    return '_' + NAMESPACE + '_' + ARCH + '_insts'

def staticInstsVarName():
    return '_' + instsVarName()

def instEncFuncName(instr):
    return symbolToC(instr.name, archPrefix())

def prefFuncName(funcId):
    return symbolToC('prefs_' + str(funcId), archPrefix())

def calledFuncName(funcId):
    return symbolToC('func_' + str(funcId), archPrefix())

def permutationTableVarName(n):
    return 'permutations' + str(n)

def paramsTypeName(basic = False):
    if basic:
        return enumTypeName('basic_params')
    return enumTypeName('params')

def paramIdTypeName(basic = False):
    if basic:
        return enumTypeName('basic_param_id')
    return enumTypeName('param_id')
