import os
import sys
import unittest

sys.path.append(os.path.join(os.path.dirname(__file__), '../src'))

from PyQt5.QtCore import QCoreApplication, QSettings

from RoseCAM.common.geom import LatheSettings
from RoseCAM.common.settings import *
from RoseCAM.cam.passplan import PassPlan, Rotation

app = QCoreApplication.instance() or QCoreApplication(sys.argv)

class ConfigSettingsForTest(ConfigSettings):
    def createSettingsObj(self):
        settings = QSettings("RoseCAM", "RoseCAM-test")
        settings.clear()
        return settings

class ConfigSettingsTest(unittest.TestCase):
    def setUp(self):
        self.saved = {s.attr_name: getattr(LatheSettings, self.lathe_name(s)) for s in ConfigSettings.setting_list}
        self.settings = ConfigSettingsForTest()
    def tearDown(self):
        for s in ConfigSettings.setting_list:
            setattr(LatheSettings, self.lathe_name(s), self.saved[s.attr_name])
        self.settings.settings.clear()
    def lathe_name(self, setting):
        return 'RESOLUTION' if setting.attr_name == 'resolution' else setting.attr_name
    def testDefaults(self):
        self.assertEqual(self.settings.resolution, 0.01)
        self.assertEqual(self.settings.steps_per_rot, 720)
        self.assertEqual(self.settings.index_safety, 0.020)
        self.assertEqual(self.settings.rotation, Rotation.PLUS_ALWAYS)
        self.assertEqual(self.settings.soft_lift, 0.0)
    def testRoundTrip(self):
        self.settings.steps_per_rot = 1440
        self.settings.pass_depth = 0.015
        self.settings.rotation = Rotation.NEG_LAST
        self.settings.soft_lift = 12.5
        self.settings.save()
        self.assertEqual(self.settings.settings.value('passes/rotation'), 'NEG_LAST')
        self.assertEqual(self.settings.settings.value('passes/pass_depth'), '0.0150')
        self.settings.steps_per_rot = 0
        self.settings.rotation = Rotation.PLUS_ALWAYS
        self.settings.load()
        self.assertEqual(self.settings.steps_per_rot, 1440)
        self.assertEqual(self.settings.pass_depth, 0.015)
        self.assertEqual(self.settings.rotation, Rotation.NEG_LAST)
        self.assertEqual(self.settings.soft_lift, 12.5)
    def testBadEnum(self):
        self.settings.settings.setValue('passes/rotation', 'SIDEWAYS')
        self.settings.load()
        self.assertEqual(self.settings.rotation, Rotation.PLUS_ALWAYS)
    def testUpdate(self):
        self.settings.resolution = 0.005
        self.settings.last_depth = 0.002
        self.settings.rotation = Rotation.NEG_ALWAYS
        self.settings.update()
        self.assertEqual(LatheSettings.RESOLUTION, 0.005)
        self.assertEqual(LatheSettings.last_depth, 0.002)
        plan = PassPlan.from_settings()
        self.assertEqual(plan.last_depth, 0.002)
        self.assertTrue(plan.coarse_negative())

if __name__ == '__main__':
    unittest.main()
