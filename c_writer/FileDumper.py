################################################################################
#
# @file     FileDumper.py
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
import re

from c_writer import Writer

licenseText = """// This file was generated by ISAGEN and is part of ISAGEN.
//
// ISAGEN is free software; you can redistribute it and/or modify
// it under the terms of the GNU Lesser General Public License as
// published by the Free Software Foundation; either version 3 of the
// License, or (at your option) any later version.
"""

class FileDumper:
    """Dumps a list of elements on a file. Headers get an include guard and
    the declarations of the elements, implementation files their
    implementations. Includes of all members are collected and sorted."""

    def __init__(self, name, isHeader, indentSize = 2, lineWidth = 80):
        self.name = name
        self.isHeader = isHeader
        self.members = []
        self.includes = []
        self.indentSize = indentSize
        self.lineWidth = lineWidth

    def addInclude(self, include):
        if isinstance(include, str):
            include = [include]
        for i in include:
            if not i in self.includes:
                self.includes.append(i)

    def addMember(self, member):
        if isinstance(member, list):
            for i in member:
                self.members.append(i)
        else:
            self.members.append(member)

    def guardName(self):
        return re.sub('[^A-Za-z0-9]', '_', os.path.basename(self.name)).upper()

    def write(self):
        if os.path.exists(self.name):
            os.remove(self.name)
        writer = Writer.CodeWriter(self.name, indentSize = self.indentSize, lineWidth = self.lineWidth)
        writer.write(licenseText)
        if self.isHeader:
            writer.write('\n#ifndef ' + self.guardName() + '\n')
            writer.write('#define ' + self.guardName() + '\n')

        includes = list(self.includes)
        for member in self.members:
            for include in member.getIncludes():
                if include and not include in includes:
                    includes.append(include)
        # Local includes are quoted, system ones use angle brackets.
        systemIncludes = sorted([i for i in includes if not i.startswith('"')])
        localIncludes = sorted([i for i in includes if i.startswith('"')])
        if includes:
            writer.write('\n')
        for include in systemIncludes:
            writer.write('#include <' + include + '>\n')
        for include in localIncludes:
            writer.write('#include ' + include + '\n')

        for member in self.members:
            writer.write('\n')
            if self.isHeader:
                member.writeDeclaration(writer)
            else:
                member.writeImplementation(writer)

        if self.isHeader:
            writer.write('\n#endif\n')
        writer.flush()
        writer.close()
