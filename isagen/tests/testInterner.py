################################################################################
#
# @file     testInterner.py
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

from isagen.encoding import Routine, Write
from isagen.interner import RequestTable, PermutationTables

class TestInterner(unittest.TestCase):

    def testIdsInRequestOrder(self):
        table = RequestTable()
        self.assertEqual(table.request('a', 'first'), 0)
        self.assertEqual(table.request('b', 'first'), 1)
        self.assertEqual(table.request('a', 'second'), 0)
        self.assertEqual(len(table), 2)
        self.assertEqual(table.getId('b'), 1)
        self.assertEqual(table.keyAt(1), 'b')
        self.assertEqual(table.consumers('a'), ['first', 'second'])
        self.assertEqual([(i[0], i[1]) for i in table], [('a', 0), ('b', 1)])

    def testStructuralKeys(self):
        table = RequestTable()
        first = table.request(Routine('rex', [Write(0x48, 8)]), None)
        second = table.request(Routine('other name', [Write(0x48, 8)]), None)
        self.assertEqual(first, second)
        self.assertEqual(table.request(Routine('rex', [Write(0x49, 8)]), None), 1)
        self.assertTrue(Routine('', [Write(0x48, 8)]) in table)

    def testPermutations(self):
        tables = PermutationTables()
        permutations = tables.table(3)
        self.assertEqual(len(permutations), 6)
        self.assertEqual(permutations[0], (0, 1, 2))
        self.assertEqual(permutations[-1], (2, 1, 0))
        self.assertIs(tables.table(3), permutations)
        self.assertEqual(tables.request(3), ('permutations3', 6))
        self.assertEqual(len(tables), 1)

    def testPermutationsInRequestOrder(self):
        tables = PermutationTables()
        tables.request(2)
        tables.request(3)
        tables.request(2)
        self.assertEqual([i[0] for i in tables], [2, 3])
