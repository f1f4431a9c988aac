################################################################################
#
# @file     CustomCode.py
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

import copy

class Code:
    """Custom code, used as the body of functions or as a verbatim block of
    a generated file. Local variables are declared before the code."""

    def __init__(self, code, includes = []):
        self.code = code
        if isinstance(includes, str):
            self.includes = [includes]
        else:
            self.includes = list(includes)
        self.variables = []

    def addInclude(self, include):
        if isinstance(include, str):
            include = [include]
        for i in include:
            if not i in self.includes:
                self.includes.append(i)

    def addVariable(self, variable):
        for var in self.variables:
            if var.name == variable.name:
                raise Exception('Variable ' + variable.name + ' already declared in code.')
        self.variables.append(variable)
        self.addInclude(variable.getIncludes())

    def writeDeclaration(self, writer):
        self.writeImplementation(writer)

    def writeImplementation(self, writer):
        for var in self.variables:
            var.writeImplementation(writer)
        if self.variables and self.code:
            writer.write('\n')
        if self.code:
            writer.write(self.code)
            if not self.code.endswith('\n'):
                writer.write('\n')

    def getIncludes(self):
        return copy.copy(self.includes)

    def __str__(self):
        return self.code
