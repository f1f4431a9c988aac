################################################################################
#
# @file     unitWriter.py
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

import os
from collections import OrderedDict

import c_writer

from isagen import names
from isagen import paramsWriter
from isagen import x64Defs
from isagen.domains import Interval, Enumeration, IntegerWidth, ParameterDomainRegistry
from isagen.errors import GenerationError, ParameterNotFound, UnhandledVariant
from isagen.interner import RequestTable, PermutationTables
from isagen.translator import EncodingTranslator

try:
    import networkx as NX
except ImportError:
    raise GenerationError('Cannot import required module networkx. Please install networkx >= 2.0.')

################################################################################
# Globals and Helpers
################################################################################
# Output phases and the phases they consume the results of. Declaration
# order is the preferred emission order.
PHASES = OrderedDict([
    ('inst_funcs', []),
    ('pref_funcs', ['inst_funcs']),
    ('permutation_tables', ['inst_funcs']),
    ('called_funcs', ['inst_funcs', 'pref_funcs']),
    ('insts', ['called_funcs', 'pref_funcs']),
    ('inst_operands', ['called_funcs', 'pref_funcs']),
    ('inst_mnems', ['inst_funcs']),
    ('inst_params', ['called_funcs', 'pref_funcs']),
    ('params_type_decl', []),
    ('params_funcs', []),
    ('param_domains', ['inst_params']),
    ('enums', []),
    ('params_funcs_header', []),
])

HEADER_PHASES = ['enums', 'params_type_decl', 'params_funcs_header']

ENUMS_FILE = 'evoasm-x64-enums.h'
PARAMS_FILE = 'evoasm-x64-params.h'
INSTS_FILE = 'evoasm-x64-insts.c'

def getPhaseOrder(phases):
    """Sorts the phases so that each one follows the phases it depends on;
    independent phases keep their declaration order."""
    phaseGraph = NX.DiGraph()
    for phase in phases.keys():
        phaseGraph.add_node(phase)
    for phase, dependencies in phases.items():
        for dependency in dependencies:
            if not dependency in phases:
                raise GenerationError('Phase ' + phase + ' depends on unknown phase ' + dependency + '.')
            phaseGraph.add_edge(dependency, phase)
    # Check for circular dependencies.
    if not NX.is_directed_acyclic_graph(phaseGraph):
        raise GenerationError('Detected circular dependence between output phases.')
    phaseIndex = dict([(phase, index) for index, phase in enumerate(phases.keys())])
    return list(NX.lexicographical_topological_sort(phaseGraph, key = lambda phase: phaseIndex[phase]))

def domainToC(domain):
    """Returns the C type and initializer of a domain constant"""
    if isinstance(domain, IntegerWidth):
        if domain.bits == 64:
            domainType = 'EVOASM_DOMAIN_TYPE_INT64'
        else:
            domainType = 'EVOASM_DOMAIN_TYPE_INTERVAL'
        if domain.signed:
            bounds = 'INT' + str(domain.bits) + '_MIN, INT' + str(domain.bits) + '_MAX'
        else:
            bounds = '0, UINT' + str(domain.bits) + '_MAX'
        return 'evoasm_interval_t', '{' + domainType + ', ' + bounds + '}'
    elif isinstance(domain, Interval):
        return 'evoasm_interval_t', '{EVOASM_DOMAIN_TYPE_INTERVAL, ' + str(domain.min) + ', ' + str(domain.max) + '}'
    elif isinstance(domain, Enumeration):
        values = []
        for value in domain.values:
            if isinstance(value, str):
                values.append(names.registerNameToC(value))
            else:
                values.append(str(value))
        return 'evoasm_enum' + str(len(domain)) + '_t', '{EVOASM_DOMAIN_TYPE_ENUM, ' + str(len(domain)) + ', {' + ', '.join(values) + '}}'
    raise UnhandledVariant('Unexpected domain ' + repr(domain))

def bitmap(symbols, selected):
    value = 0
    for index, symbol in enumerate(symbols):
        if symbol in selected:
            value |= 1 << index
    return value

def boolToC(value):
    if value:
        return '1'
    return '0'

################################################################################
# Translation unit
################################################################################
class CUnit:
    """Translates an ISA into the blocks of C code of the encoder: the
    encoding functions, the instruction, operand and parameter tables, the
    parameter struct and its accessors and the enumerations. Each output
    phase is run once, in dependency order; the emitted ids follow the
    order in which instructions and shared routines are first met."""
    def __init__(self, isa = None, verbose = False, indentSize = 2, lineWidth = 100, paramsWordBudget = 4, basicParamsWordBudget = 1):
        if isa is None:
            from isagen import x64Isa
            isa = x64Isa.buildIsa()
        if not isinstance(indentSize, int) or indentSize < 1:
            raise GenerationError('Invalid indent size ' + str(indentSize) + ', expected positive integer.')
        if not isinstance(lineWidth, int) or lineWidth < 20:
            raise GenerationError('Invalid line width ' + str(lineWidth) + ', expected at least 20 characters.')
        self.isa = isa
        self.verbose = verbose
        self.indentSize = indentSize
        self.lineWidth = lineWidth
        self.setParamsBudget(paramsWordBudget)
        self.setParamsBudget(basicParamsWordBudget, basic = True)

        self.paramDomains = ParameterDomainRegistry()
        self.prefFuncs = RequestTable()
        self.calledFuncs = RequestTable()
        self.permutationTables = PermutationTables()
        self.instTranslators = []
        self.calledFuncTranslators = {}
        self.phaseOrder = getPhaseOrder(PHASES)
        self.phaseGenerators = {
            'inst_funcs': self.getInstFuncs,
            'pref_funcs': self.getPrefFuncs,
            'permutation_tables': self.getPermutationTables,
            'called_funcs': self.getCalledFuncs,
            'insts': self.getInsts,
            'inst_operands': self.getInstOperands,
            'inst_mnems': self.getInstMnems,
            'inst_params': self.getInstParams,
            'params_type_decl': self.getParamsTypeDecl,
            'params_funcs': self.getParamsFuncs,
            'param_domains': self.getParamDomains,
            'enums': self.getEnums,
            'params_funcs_header': self.getParamsFuncsHeader,
        }
        self.elements = OrderedDict()
        self.blocks = OrderedDict()
        if self.verbose:
            print('\tCreating ' + self.isa.arch + ' unit...')

    def setParamsBudget(self, words, basic = False):
        """Sets the number of 64 bit words the parameter struct may use"""
        if not isinstance(words, int) or words < 1:
            raise GenerationError('Invalid word budget ' + str(words) + ', expected positive integer.')
        if basic:
            self.basicParamsWordBudget = words
        else:
            self.paramsWordBudget = words

    ############################################################################
    # Requests from the translators
    ############################################################################
    def requestPrefFunc(self, writes, translator):
        funcId = self.prefFuncs.request(writes, translator)
        tableVarName, tableSize = self.permutationTables.request(len(writes))
        return funcId, tableVarName, tableSize

    def requestCalledFunc(self, routine, translator):
        funcId = self.calledFuncs.request(routine, translator)
        # Routines already emitted do not propagate to late callers.
        if funcId in self.calledFuncTranslators:
            funcTranslator = self.calledFuncTranslators[funcId]
            translator.mergeParams(funcTranslator.parameters, funcTranslator.paramDomains)
        return funcId

    ############################################################################
    # Phases
    ############################################################################
    def runPhase(self, phase):
        if not phase in self.phaseGenerators:
            raise GenerationError('Unknown output phase ' + phase + '.')
        if phase in self.elements:
            raise GenerationError('Phase ' + phase + ' already translated.')
        for dependency in PHASES[phase]:
            if not dependency in self.elements:
                raise GenerationError('Phase ' + phase + ' needs phase ' + dependency + ' to be translated first.')
        if self.verbose:
            print('\t\tTranslating ' + phase.replace('_', ' ') + '...')
        elements = self.phaseGenerators[phase]()
        self.elements[phase] = elements
        self.blocks[phase] = c_writer.renderElements(elements, self.indentSize, self.lineWidth, implementation = not phase in HEADER_PHASES)
        return self.blocks[phase]

    def translate(self):
        """Runs all the phases; returns the text blocks, in phase order, and
        the scalar values describing the generated tables."""
        for phase in self.phaseOrder:
            self.runPhase(phase)
        return self.blocks, self.getScalars()

    def getInstFuncs(self):
        functions = []
        for instr in self.isa:
            translator = EncodingTranslator(self, instr)
            functions.append(translator.emitInstFunc())
            self.instTranslators.append(translator)
        return functions

    def getPrefFuncs(self):
        functions = []
        for writes, funcId, consumers in self.prefFuncs:
            tableVarName = names.permutationTableVarName(len(writes))
            funcTranslator = EncodingTranslator(self)
            funcTranslator.callers = consumers
            functions.append(funcTranslator.emitPrefFunc(writes, funcId, tableVarName))
            for translator in consumers:
                translator.mergeParams(funcTranslator.parameters, funcTranslator.paramDomains)
        return functions

    def getPermutationTables(self):
        tables = []
        for n, permutations in self.permutationTables:
            rows = ['{' + ', '.join([str(i) for i in permutation]) + '},' for permutation in permutations]
            tables.append(c_writer.Variable(names.permutationTableVarName(n), c_writer.uint8Type.makeConst(), static = True, initValue = '{\n' + '\n'.join(rows) + '\n}', dimensions = [len(permutations), n]))
        return tables

    def getCalledFuncs(self):
        # Emitting a routine may request further routines.
        functions = []
        funcId = 0
        while funcId < len(self.calledFuncs):
            routine = self.calledFuncs.keyAt(funcId)
            consumers = self.calledFuncs.consumers(routine)
            funcTranslator = EncodingTranslator(self)
            funcTranslator.callers = consumers
            functions.append(funcTranslator.emitCalledFunc(routine, funcId))
            self.calledFuncTranslators[funcId] = funcTranslator
            for translator in list(consumers):
                translator.mergeParams(funcTranslator.parameters, funcTranslator.paramDomains)
            funcId += 1
        return functions

    def getInstRow(self, translator):
        instr = translator.instr
        if translator.parameters:
            paramsRef = '(evoasm_x64_param_t *) ' + names.instParamsVarName(instr)
        else:
            paramsRef = 'NULL'
        if len(instr.operands) > 0:
            operandsRef = '(evoasm_x64_operand_t *) ' + names.instOperandsVarName(instr)
        else:
            operandsRef = 'NULL'
        if instr.flags:
            flags = ' | '.join([names.instFlagToC(i) for i in instr.flags])
        else:
            flags = '0'
        fields = [
            str(len(instr.operands)),
            names.instNameToC(instr),
            str(len(translator.parameters)),
            str(bitmap(x64Defs.EXCEPTIONS, instr.exceptions)),
            flags,
            str(bitmap(x64Defs.FEATURES, instr.features)) + 'ull',
            paramsRef,
            '(evoasm_x64_inst_enc_func_t) ' + names.instEncFuncName(instr),
            operandsRef,
            '(char *) ' + names.instMnemVarName(instr),
        ]
        return '{\n' + ',\n'.join(fields) + '\n},'

    def getInsts(self):
        rows = [self.getInstRow(i) for i in self.instTranslators]
        instType = c_writer.Type('evoasm_x64_inst_t').makeConst()
        staticInsts = c_writer.Variable(names.staticInstsVarName(), instType, static = True, initValue = '{\n' + '\n'.join(rows) + '\n}', dimensions = [''])
        insts = c_writer.Variable(names.instsVarName(), instType.makePointer(), initValue = names.staticInstsVarName())
        return [staticInsts, insts]

    def getOperandRow(self, translator, operand):
        instr = translator.instr
        access = operand.access()
        if operand.parameterName is not None:
            if not operand.parameterName in translator.parameters:
                raise ParameterNotFound('Parameter ' + operand.parameterName + ' of operand ' + operand.name + ' not found in ' + str(translator.parameters), instr.name)
            paramIndex = translator.parameters.index(operand.parameterName)
        else:
            paramIndex = len(translator.parameters)

        if operand.size1() is not None:
            size1 = names.operandSizeToC(operand.size1())
        else:
            size1 = names.countConstToC('operand_sizes')
        if operand.size2() is not None:
            size2 = names.operandSizeToC(operand.size2())
        else:
            size2 = names.countConstToC('operand_sizes')
        if operand.registerType is not None:
            regType = names.regTypeToC(operand.registerType)
        else:
            regType = names.countConstToC('reg_types')
        if 'w' in operand.accessedBits:
            writeMask = names.bitMaskToC(operand.accessedBits['w'])
        else:
            writeMask = names.bitMaskToC('all')

        # Only register operands carry a register id, memory operands none.
        if operand.type in ('reg', 'rm') and operand.register is not None:
            value = names.registerNameToC(operand.register)
        elif operand.type in ('reg', 'rm'):
            value = names.registerNameToC('none')
        elif operand.type == 'imm' and operand.imm is not None:
            value = str(operand.imm)
        else:
            value = '255'

        fields = [
            boolToC('r' in access),
            boolToC('w' in access),
            boolToC('u' in access),
            boolToC('c' in access),
            boolToC(operand.implicit),
            boolToC(operand.mnemonic),
            str(paramIndex),
            names.operandTypeToC(operand.type),
            size1,
            size2,
            regType,
            writeMask,
            '{\n' + value + '\n}',
        ]
        return '{\n' + ',\n'.join(fields) + '\n},'

    def getInstOperands(self):
        tables = []
        operandType = c_writer.Type('evoasm_x64_operand_t').makeConst()
        for translator in self.instTranslators:
            instr = translator.instr
            if len(instr.operands) == 0:
                continue
            rows = [self.getOperandRow(translator, i) for i in instr.operands]
            tables.append(c_writer.Variable(names.instOperandsVarName(instr), operandType, static = True, initValue = '{\n' + '\n'.join(rows) + '\n}', dimensions = ['']))
        return tables

    def getInstMnems(self):
        mnems = []
        for translator in self.instTranslators:
            instr = translator.instr
            mnems.append(c_writer.Variable(names.instMnemVarName(instr), c_writer.charType.makeConst(), static = True, initValue = '"' + instr.mnemonic + '"', dimensions = ['']))
        return mnems

    def getInstParams(self):
        tables = []
        paramType = c_writer.Type('evoasm_x64_param_t').makeConst()
        for translator in self.instTranslators:
            instr = translator.instr
            if not translator.parameters:
                continue
            rows = []
            for paramName in translator.parameters:
                if paramName in translator.paramDomains:
                    domain = translator.paramDomains[paramName]
                else:
                    domain = instr.paramDomain(paramName)
                domain = self.paramDomains.register(domain)
                rows.append('{\n' + names.paramNameToC(paramName) + ',\n(evoasm_domain_t *) &' + domain.varName() + '\n},')
            tables.append(c_writer.Variable(names.instParamsVarName(instr), paramType, static = True, initValue = '{\n' + '\n'.join(rows) + '\n}', dimensions = ['']))
        return tables

    def getParamsLayout(self, basic = False):
        if basic:
            layout = paramsWriter.ParametersLayout(x64Defs.BASIC_PARAMETERS, True, wordBudget = self.basicParamsWordBudget)
        else:
            layout = paramsWriter.ParametersLayout(x64Defs.PARAMETERS, False, wordBudget = self.paramsWordBudget)
        if self.verbose:
            print('\t\t' + names.paramsTypeName(basic) + ' uses ' + str(layout.words()) + ' words')
        return layout

    def getParamsTypeDecl(self):
        return [paramsWriter.getParametersTypeDeclaration(self.getParamsLayout(False)),
                paramsWriter.getParametersTypeDeclaration(self.getParamsLayout(True))]

    def getParamsFuncs(self):
        return paramsWriter.getParametersFunctions(stub = True)

    def getParamsFuncsHeader(self):
        return paramsWriter.getParametersFunctions(stub = False)

    def getParamDomains(self):
        variables = []
        for domain in self.paramDomains:
            domainType, domainValue = domainToC(domain)
            variables.append(c_writer.Variable(domain.varName(), c_writer.Type(domainType).makeConst(), static = True, initValue = domainValue))
        variables.append(c_writer.Variable('evoasm_n_domains', c_writer.uint16Type.makeConst(), initValue = str(len(self.paramDomains))))
        return variables

    def getEnum(self, what, symbols, prefix, countName = None, values = None):
        enum = c_writer.Enum(names.enumTypeName(what), [], typedef = True)
        for index, symbol in enumerate(symbols):
            value = ''
            if values is not None:
                value = values[index]
            enum.addValue(names.constNameToC(symbol, names.archPrefix(prefix)), value)
        if countName is not None:
            enum.addValue(names.countConstToC(countName))
        return enum

    def getEnums(self):
        bitMasks = [str(i[0]) + '_' + str(i[1]) for i in self.isa.bitMasks()] + ['all']
        instFlagValues = [str(1 << i) for i in range(len(x64Defs.INST_FLAGS))]
        return [
            self.getEnum('inst_id', [i.name for i in self.isa], 'inst', 'insts'),
            self.getEnum('reg_id', x64Defs.REGISTER_NAMES + ['none'], 'reg', 'regs'),
            self.getEnum('reg_type', x64Defs.REGISTER_TYPES, 'reg_type', 'reg_types'),
            self.getEnum('operand_type', x64Defs.OPERAND_TYPES, 'operand_type', 'operand_types'),
            self.getEnum('operand_size', x64Defs.OPERAND_SIZES, 'operand_size', 'operand_sizes'),
            self.getEnum('inst_flag', x64Defs.INST_FLAGS, 'inst_flag', values = instFlagValues),
            self.getEnum('feature', x64Defs.FEATURES, 'feature', 'features'),
            self.getEnum('exception', x64Defs.EXCEPTIONS, 'exception', 'exceptions'),
            self.getEnum('param_id', x64Defs.PARAMETERS, 'param', 'params'),
            self.getEnum('basic_param_id', x64Defs.BASIC_PARAMETERS + ['none'], 'basic_param', 'basic_params'),
            self.getEnum('param_type', x64Defs.PARAMETER_TYPES, 'param_type', 'param_types'),
            self.getEnum('bit_mask', bitMasks, 'bit_mask', 'bit_masks'),
        ]

    ############################################################################
    # Scalars and output
    ############################################################################
    def maxParamsPerInst(self):
        if not self.instTranslators:
            return 0
        return max([len(i.parameters) for i in self.instTranslators])

    def getScalars(self):
        maxParams = self.maxParamsPerInst()
        return OrderedDict([
            ('max_params_per_inst', maxParams),
            ('param_idx_bitsize', maxParams.bit_length()),
            ('n_domains', len(self.paramDomains)),
            ('n_insts', len(self.isa)),
            ('reg_id_bitsize', x64Defs.REG_ID_BITSIZE),
            ('isa_signature', self.isa.getInstructionSig()),
        ])

    def write(self, folder):
        """Dumps the generated code: the enumerations and parameter
        headers and the instruction tables implementation file."""
        if not self.elements:
            self.translate()
        if not os.path.exists(folder):
            os.makedirs(folder)

        enumsDumper = c_writer.FileDumper(os.path.join(folder, ENUMS_FILE), True, self.indentSize, self.lineWidth)
        enumsDumper.addMember(self.elements['enums'])
        enumsDumper.write()

        paramsDumper = c_writer.FileDumper(os.path.join(folder, PARAMS_FILE), True, self.indentSize, self.lineWidth)
        paramsDumper.addInclude('"' + ENUMS_FILE + '"')
        paramsDumper.addMember(self.elements['params_type_decl'])
        paramsDumper.addMember(self.elements['params_funcs_header'])
        paramsDumper.addMember(self.elements['params_funcs'])
        paramsDumper.write()

        # Shared functions are called before their definition.
        prototypes = c_writer.renderElements(self.elements['pref_funcs'] + self.elements['called_funcs'], self.indentSize, self.lineWidth, implementation = False)
        instsDumper = c_writer.FileDumper(os.path.join(folder, INSTS_FILE), False, self.indentSize, self.lineWidth)
        instsDumper.addInclude(['"' + PARAMS_FILE + '"', '"evoasm-x64-insts.h"'])
        instsDumper.addMember(self.elements['permutation_tables'])
        if prototypes:
            instsDumper.addMember(c_writer.Code(prototypes))
        for phase in ('pref_funcs', 'called_funcs', 'inst_funcs', 'inst_mnems', 'inst_operands', 'param_domains', 'inst_params', 'insts', 'params_funcs'):
            instsDumper.addMember(self.elements[phase])
        instsDumper.write()
        if self.verbose:
            print('\t\tWritten ' + ENUMS_FILE + ', ' + PARAMS_FILE + ' and ' + INSTS_FILE + ' to ' + folder)
