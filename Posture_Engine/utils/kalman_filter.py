"""Kalman filters for landmark coordinate smoothing."""


class KalmanFilter1D:
    """Scalar constant-position Kalman filter."""

    def __init__(self, process_variance: float = 1e-5, measurement_variance: float = 1e-2,
                 initial_value: float = None):
        self.Q, self.R = process_variance, measurement_variance
        self.x, self.P, self.K = initial_value, 1.0, 0.0

    def update(self, measurement: float) -> float:
        # First measurement seeds the state instead of pulling from 0
        if self.x is None:
            self.x = measurement
            return self.x
        self.P = self.P + self.Q
        self.K = self.P / (self.P + self.R)
        self.x = self.x + self.K * (measurement - self.x)
        self.P = (1 - self.K) * self.P
        return self.x

    @property
    def value(self) -> float:
        return self.x

    @property
    def is_initialized(self) -> bool:
        return self.x is not None

    def reset(self, value: float = None):
        self.x, self.P, self.K = value, 1.0, 0.0


class KalmanFilter2D:
    """Independent filters for (x, y) image coordinates."""

    def __init__(self, process_variance: float = 1e-5, measurement_variance: float = 1e-2):
        self.filter_x = KalmanFilter1D(process_variance, measurement_variance)
        self.filter_y = KalmanFilter1D(process_variance, measurement_variance)

    def update(self, x: float, y: float) -> tuple:
        return (self.filter_x.update(x), self.filter_y.update(y))

    @property
    def value(self) -> tuple:
        return (self.filter_x.value, self.filter_y.value)

    def reset(self):
        self.filter_x.reset()
        self.filter_y.reset()
