from PyQt5.QtCore import QObject, pyqtSignal

class Observable(QObject):
    """Model object that announces every change of a property.

    The signal carries (source, property name, old value, new value).
    Parents that aggregate other observables connect to them with
    watch() and pass the notifications on."""
    propertyChanged = pyqtSignal(object, str, object, object)
    def __init__(self):
        QObject.__init__(self)
        self.watched = []
    def emitPropertyChanged(self, name, old=None, new=None):
        self.propertyChanged.emit(self, name, old, new)
    def setPropertyValue(self, name, value):
        old = getattr(self, name)
        if old == value:
            return False
        setattr(self, name, value)
        self.emitPropertyChanged(name, old, value)
        return True
    def watch(self, other):
        if other is None or other in self.watched:
            return
        other.propertyChanged.connect(self.onWatchedChanged)
        self.watched.append(other)
    def unwatch(self, other):
        if other in self.watched:
            other.propertyChanged.disconnect(self.onWatchedChanged)
            self.watched.remove(other)
    def disconnectAll(self):
        for other in list(self.watched):
            self.unwatch(other)
    def onWatchedChanged(self, source, name, old, new):
        self.emitPropertyChanged(name, old, new)

class ChangeRecorder(object):
    """Collects notifications from an observable, used by tests and by
    callers that batch updates."""
    def __init__(self, source=None):
        self.changes = []
        if source is not None:
            self.attach(source)
    def attach(self, source):
        source.propertyChanged.connect(self.onChanged)
    def onChanged(self, source, name, old, new):
        self.changes.append((source, name, old, new))
    def names(self):
        return [change[1] for change in self.changes]
    def clear(self):
        self.changes = []
