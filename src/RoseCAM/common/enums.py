class EnumClass(object):
    """Base for enumerations described by (value, name, ...) tuples."""
    @classmethod
    def toString(classInst, value):
        return classInst.toItem(value, 1)
    @classmethod
    def fromString(classInst, value):
        res = classInst.itemFromString(value, None, 0)
        if res is None:
            raise ValueError(f"Unknown {classInst.__name__} value: {value}")
        return res
    @classmethod
    def itemFromString(classInst, value, def_value=None, loc=0):
        for data in classInst.descriptions:
            if value == data[1]:
                return data[loc]
        return def_value
    @classmethod
    def toItem(classInst, value, loc):
        for data in classInst.descriptions:
            if value == data[0]:
                return data[loc]
        return None
    @classmethod
    def toTuple(classInst, value):
        for data in classInst.descriptions:
            if value == data[0]:
                return data
        return None
    @classmethod
    def values(classInst):
        return [data[0] for data in classInst.descriptions]
    @classmethod
    def isValid(classInst, value):
        return classInst.toTuple(value) is not None
