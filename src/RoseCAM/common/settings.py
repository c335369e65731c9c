from PyQt5.QtCore import QSettings

from RoseCAM.common.geom import LatheSettings
from RoseCAM.cam.passplan import Rotation

class ConfigSetting(object):
    def __init__(self, attr_name, setting_pathname, def_value):
        self.attr_name = attr_name
        self.setting_pathname = setting_pathname
        self.def_value = def_value
    def init(self, target):
        setattr(target, self.attr_name, self.def_value)
    def load(self, settings, target):
        if settings.contains(self.setting_pathname):
            setattr(target, self.attr_name, self.from_setting(settings.value(self.setting_pathname)))
    def save(self, settings, source):
        settings.setValue(self.setting_pathname, self.to_setting(getattr(source, self.attr_name)))
    def from_setting(self, cfgvalue):
        return str(cfgvalue)
    def to_setting(self, value):
        return str(value)

class IntConfigSetting(ConfigSetting):
    def from_setting(self, cfgvalue):
        return int(cfgvalue)

class FloatConfigSetting(ConfigSetting):
    def __init__(self, attr_name, setting_pathname, def_value, digits):
        ConfigSetting.__init__(self, attr_name, setting_pathname, def_value)
        self.digits = digits
    def from_setting(self, cfgvalue):
        return float(cfgvalue)
    def to_setting(self, value):
        return f"{value:0.{self.digits}f}"

class EnumConfigSetting(ConfigSetting):
    def __init__(self, attr_name, setting_pathname, def_value, enum_class):
        ConfigSetting.__init__(self, attr_name, setting_pathname, def_value)
        self.enum_class = enum_class
    def from_setting(self, cfgvalue):
        return self.enum_class.itemFromString(str(cfgvalue), self.def_value)
    def to_setting(self, value):
        return self.enum_class.toString(value)

class ConfigSettings(object):
    setting_list = [
        FloatConfigSetting('resolution', 'outline/resolution', LatheSettings.RESOLUTION, 4),
        IntConfigSetting('steps_per_rot', 'motion/steps_per_rot', LatheSettings.steps_per_rot),
        IntConfigSetting('surface_sectors', 'surface/sectors', LatheSettings.surface_sectors),
        FloatConfigSetting('index_safety', 'motion/index_safety', LatheSettings.index_safety, 4),
        FloatConfigSetting('line_safety', 'motion/line_safety', LatheSettings.line_safety, 4),
        FloatConfigSetting('cut_margin', 'motion/cut_margin', LatheSettings.cut_margin, 4),
        FloatConfigSetting('pass_depth', 'passes/pass_depth', LatheSettings.pass_depth, 4),
        IntConfigSetting('pass_step', 'passes/pass_step', LatheSettings.pass_step),
        FloatConfigSetting('last_depth', 'passes/last_depth', LatheSettings.last_depth, 4),
        IntConfigSetting('last_step', 'passes/last_step', LatheSettings.last_step),
        EnumConfigSetting('rotation', 'passes/rotation', LatheSettings.rotation, Rotation),
        FloatConfigSetting('soft_lift', 'passes/soft_lift', LatheSettings.soft_lift, 2),
    ]
    def __init__(self):
        self.settings = self.createSettingsObj()
        for i in self.setting_list:
            i.init(self)
        self.load()
    def createSettingsObj(self):
        return QSettings("RoseCAM", "RoseCAM")
    def load(self):
        settings = self.settings
        settings.sync()
        for i in self.setting_list:
            i.load(settings, self)
    def save(self):
        settings = self.settings
        for i in self.setting_list:
            i.save(settings, self)
        settings.sync()
    def update(self):
        LatheSettings.RESOLUTION = self.resolution
        LatheSettings.steps_per_rot = self.steps_per_rot
        LatheSettings.surface_sectors = self.surface_sectors
        LatheSettings.index_safety = self.index_safety
        LatheSettings.line_safety = self.line_safety
        LatheSettings.cut_margin = self.cut_margin
        LatheSettings.pass_depth = self.pass_depth
        LatheSettings.pass_step = self.pass_step
        LatheSettings.last_depth = self.last_depth
        LatheSettings.last_step = self.last_step
        LatheSettings.rotation = self.rotation
        LatheSettings.soft_lift = self.soft_lift
