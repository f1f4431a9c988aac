################################################################################
#
# @file     translator.py
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

from collections import OrderedDict

import c_writer

from isagen import names
from isagen import x64Defs
from isagen.domains import Interval
from isagen.encoding import Literal, Param, IsSet, UnaryOp, BinaryOp, Write, If, Error, Call, UnorderedWrites
from isagen.errors import UnknownFieldKind, UnhandledVariant, DomainTooLarge
from isagen.paramsWriter import parameterBitsize

################################################################################
# Globals and Helpers
################################################################################
ctxType = c_writer.Type(names.enumTypeName('enc_ctx')).makePointer()

def cString(value):
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"') + '"'

################################################################################
# Translator
################################################################################
class EncodingTranslator:
    """Renders encoding actions as the body of a C function. While
    translating it records the parameters read by the body, in order of
    first use, and the domains it imposes on them. Shared routines and
    unordered writes are requested from the unit, which emits them once;
    the parameters of an emitted routine are later merged into every
    translator which requested it (and, from there, into their own
    requesters)."""
    def __init__(self, unit, instr = None):
        self.unit = unit
        self.instr = instr
        self.parameters = []
        self.paramDomains = OrderedDict()
        # Translators whose bodies call the routine emitted by this one.
        self.callers = []
        self.needsErrorLabel = False
        self.exprTranslators = {
            Literal: self.literalToC,
            Param: self.paramToC,
            IsSet: self.isSetToC,
            UnaryOp: self.unaryOpToC,
            BinaryOp: self.binaryOpToC,
        }
        self.actionTranslators = {
            Write: self.writeToC,
            If: self.ifToC,
            Error: self.errorToC,
            Call: self.callToC,
            UnorderedWrites: self.unorderedWritesToC,
        }

    def instrName(self):
        if self.instr is None:
            return None
        return self.instr.name

    def useParam(self, paramName):
        if not paramName in x64Defs.PARAMETER_BITSIZES:
            raise UnknownFieldKind('Unknown parameter ' + str(paramName), self.instrName())
        if not paramName in self.parameters:
            self.parameters.append(paramName)

    def mergeParams(self, parameters, paramDomains = None):
        if paramDomains is None:
            paramDomains = {}
        addedParams = []
        for paramName in parameters:
            if not paramName in self.parameters:
                self.parameters.append(paramName)
                addedParams.append(paramName)
        addedDomains = OrderedDict()
        for paramName, domain in paramDomains.items():
            if not paramName in self.paramDomains:
                self.paramDomains[paramName] = domain
                addedDomains[paramName] = domain
        if addedParams or addedDomains:
            for caller in self.callers:
                caller.mergeParams(addedParams, addedDomains)

    ############################################################################
    # Expressions
    ############################################################################
    def exprToC(self, expr):
        if not type(expr) in self.exprTranslators:
            raise UnhandledVariant('Cannot translate expression ' + repr(expr), self.instrName())
        return self.exprTranslators[type(expr)](expr)

    def literalToC(self, expr):
        if expr.value is True:
            return 'true'
        if expr.value is False:
            return 'false'
        if expr.value < 0:
            return str(expr.value)
        return hex(expr.value)

    def paramToC(self, expr):
        self.useParam(expr.name)
        return 'ctx->params.' + expr.name

    def isSetToC(self, expr):
        if not expr.name in x64Defs.UNDEFINEDABLE_PARAMETERS:
            raise UnknownFieldKind('Parameter ' + str(expr.name) + ' has no presence flag', self.instrName())
        self.useParam(expr.name)
        return 'ctx->params.' + expr.name + '_set'

    def unaryOpToC(self, expr):
        operand = self.exprToC(expr.operand)
        if expr.op[0].isalpha() or expr.op[0] == '_':
            return expr.op + '(' + operand + ')'
        return '(' + expr.op + operand + ')'

    def binaryOpToC(self, expr):
        return '(' + self.exprToC(expr.lhs) + ' ' + expr.op + ' ' + self.exprToC(expr.rhs) + ')'

    ############################################################################
    # Actions
    ############################################################################
    def actionsToC(self, actions):
        code = ''
        for action in actions:
            if not type(action) in self.actionTranslators:
                raise UnhandledVariant('Cannot translate action ' + repr(action), self.instrName())
            code += self.actionTranslators[type(action)](action)
        return code

    def writeToC(self, action):
        if action.packed():
            terms = []
            shift = action.totalSize
            for value, size in zip(action.value, action.size):
                shift -= size
                terms.append('((' + self.exprToC(value) + ' & ' + hex((1 << size) - 1) + ') << ' + str(shift) + ')')
            valueCode = ' | '.join(terms)
        else:
            valueCode = self.exprToC(action.value)
        return 'evoasm_x64_enc_ctx_write' + str(action.totalSize) + '(ctx, ' + valueCode + ');\n'

    def ifToC(self, action):
        code = 'if(' + self.exprToC(action.condition) + ') {\n'
        code += self.actionsToC(action.actions)
        if action.elseActions:
            code += '} else {\n'
            code += self.actionsToC(action.elseActions)
        return code + '}\n'

    def errorToC(self, action):
        self.needsErrorLabel = True
        return 'evoasm_x64_enc_ctx_error(ctx, ' + cString(action.message) + ');\ngoto error;\n'

    def callToC(self, action):
        funcId = self.unit.requestCalledFunc(action.routine, self)
        self.needsErrorLabel = True
        return 'if(!' + names.calledFuncName(funcId) + '(ctx)) {\ngoto error;\n}\n'

    def unorderedWritesToC(self, action):
        if len(action.writes) == 1:
            return self.actionsToC(action.writes)
        if self.instr is None:
            raise UnhandledVariant('Unordered writes are only supported in instruction bodies')
        funcId, tableVarName, tableSize = self.unit.requestPrefFunc(action.writes, self)
        if tableSize - 1 >= (1 << parameterBitsize(action.param)):
            raise DomainTooLarge('Parameter ' + action.param + ' cannot select one of ' + str(tableSize) + ' orders', self.instrName())
        self.paramDomains[action.param] = Interval(0, tableSize - 1)
        orderCode = self.paramToC(Param(action.param))
        self.needsErrorLabel = True
        return 'if(!' + names.prefFuncName(funcId) + '(ctx, ' + orderCode + ')) {\ngoto error;\n}\n'

    ############################################################################
    # Functions
    ############################################################################
    def functionBody(self, code):
        code += 'return true;\n'
        if self.needsErrorLabel:
            code += '\nerror:\nreturn false;\n'
        return c_writer.Code(code)

    def emitInstFunc(self):
        code = self.actionsToC(self.instr.encoding)
        return c_writer.Function(names.instEncFuncName(self.instr), self.functionBody(code), c_writer.boolType, [c_writer.Parameter('ctx', ctxType)], static = True)

    def emitPrefFunc(self, writes, funcId, tableVarName):
        code = 'for(unsigned i = 0; i < ' + str(len(writes)) + '; i++) {\n'
        code += 'switch(' + tableVarName + '[order][i]) {\n'
        for index, write in enumerate(writes):
            code += 'case ' + str(index) + ': {\n'
            code += self.actionsToC([write])
            code += 'break;\n}\n'
        code += 'default:\nevoasm_assert_not_reached();\n}\n}\n'
        params = [c_writer.Parameter('ctx', ctxType), c_writer.Parameter('order', c_writer.uintType)]
        return c_writer.Function(names.prefFuncName(funcId), self.functionBody(code), c_writer.boolType, params, static = True)

    def emitCalledFunc(self, routine, funcId):
        code = self.actionsToC(routine.actions)
        func = c_writer.Function(names.calledFuncName(funcId), self.functionBody(code), c_writer.boolType, [c_writer.Parameter('ctx', ctxType)], static = True)
        func.addDocString(routine.name)
        return func
