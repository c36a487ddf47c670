"""Expression calculator returning the mean magnitude of its vector arguments."""

from tetracoord_pkg.cartesian import CartesianCoordinate
from tetracoord_pkg.plugins import ExpressionCalculator
from tetracoord_pkg.tetracoordinate import Tetracoordinate
from tetracoord_pkg.types import PluginEvalError


class VectorAverage(ExpressionCalculator):
    def eval(self, args):
        if len(args) == 0:
            raise PluginEvalError("vector average needs at least one vector")

        magnitudes = []
        for arg in args:
            if isinstance(arg, Tetracoordinate):
                magnitudes.append(arg.magnitude_from_cartesian)
            elif isinstance(arg, CartesianCoordinate):
                magnitudes.append(arg.magnitude)
            else:
                raise PluginEvalError(f"{arg!r} is not a vector")
        return sum(magnitudes) / len(magnitudes)


EXPRESSION_CALCULATOR = VectorAverage
