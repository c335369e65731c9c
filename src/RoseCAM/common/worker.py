import threading

class WorkerThread(threading.Thread):
    def __init__(self, parentOp, workerFunc):
        self.worker_func = workerFunc
        self.parent_operation = parentOp
        self.exception = None
        self.exception_text = None
        self.result = None
        self.progress = (0, 10000000)
        self.cancelled = False
        threading.Thread.__init__(self, target=self.threadMain)
    def getProgress(self):
        return self.progress
    def cancel(self):
        self.cancelled = True
    def threadMain(self):
        try:
            self.result = self.worker_func()
            self.progress = (self.progress[1], self.progress[1])
        except Exception as e:
            import traceback
            errorText = str(e)
            if not errorText:
                if isinstance(e, AssertionError):
                    errorText = traceback.format_exc(limit=1)
                else:
                    errorText = type(e).__name__
            self.exception = e
            self.exception_text = errorText
            if self.parent_operation is not None:
                self.parent_operation.add_warning(errorText)
            traceback.print_exc()

class SurfaceCutWorker(WorkerThread):
    """Runs the surface simulation of a cut point list in the background.
    The surface is left at a whole-revolution rotation even when cancelled."""
    def __init__(self, cutPoints, surface, cutter=None):
        self.surface = surface
        WorkerThread.__init__(self, cutPoints, lambda: cutPoints.cut_surface(surface, cutter))
