"""
Test Suite for the Control Subsystem
====================================

Tests for:
- ControlParameter caches
- ControlRange validity
- ControlSelection and ControlUpdate feedback
- ControlMechanism generate / select / update cycle
- Indirect, SaDE-CR and SDE-F mechanisms

Run with: python -m pytest tests/test_control.py -v
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

import numpy as np
import unittest

from adapt_de import (
    ConfigurationError,
    Context,
    FeedbackRejectedError,
    Individual,
    ObjectFactory,
    ParameterIndexError,
    Population,
    Random,
    RangeExhaustedError,
    TypeMismatchError,
    UnknownTypeError,
    default_registry,
    from_data,
)
from adapt_de.constants import GENERATION, TARGET_INDEX
from adapt_de.functions import Function


def build(data, seed=1):
    return ObjectFactory(default_registry(), Random(seed)).build(from_data(data))


def const(value):
    return {"classname": "RealConstantFunction", "object": value}


def real_range(lower=0.0, upper=1.0):
    return {"classname": "RealControlRange", "lower_bound": lower, "upper_bound": upper}


def multiple_parameter(count=5, initial_value=0.5):
    return {"classname": "RealMultipleControlParameter", "number_of_objects": count,
            "initial_value": initial_value}


def single_function(function):
    return {"classname": "SingleControlFunction", "Function": function}


def mechanism(function, classname="RealControlMechanism", control_function=None,
              selection=None, updates=None, **extra):
    data = {
        "classname": classname,
        "ControlRange": real_range(),
        "ControlParameter": multiple_parameter(),
        "ControlFunction": control_function or single_function(function),
        "ControlSelection": selection or {"classname": "NonInfoControlSelection"},
        "ControlUpdate": updates or [],
    }
    data.update(extra)
    return data


def make_context(parents=(5.0, 4.0, 3.0, 2.0, 1.0), children=None, index=0, generation=1, seed=1):
    """Context over a 2-D population with the given fitnesses."""
    parents = np.asarray(parents, dtype=float)
    population = Population(np.zeros((parents.size, 2)), parents)
    offspring = None
    if children is not None:
        offspring = Population(np.ones((parents.size, 2)), np.asarray(children, dtype=float))
    context = Context(Random(seed), population, offspring)
    context.store(TARGET_INDEX, index)
    context.store(GENERATION, generation)
    return context


# =============================================================================
# Context Tests
# =============================================================================

class TestContext(unittest.TestCase):

    def test_ambient_values(self):
        context = make_context(index=3, generation=7)
        self.assertEqual(context.target_index, 3)
        self.assertEqual(context.generation, 7)
        self.assertIn(TARGET_INDEX, context)

    def test_missing_value(self):
        context = Context(Random(1))
        with self.assertRaises(KeyError):
            context.take_out("missing")
        self.assertIsNone(context.get("missing"))

    def test_population_accessors(self):
        population = make_context().population
        self.assertEqual(population.size(), 5)
        self.assertEqual(population.best_index(), 4)
        self.assertEqual(population.at(1).fitness, 4.0)

    def test_population_replace(self):
        population = make_context().population
        population.replace(0, Individual(np.zeros(population.positions.shape[1]), 0.5))
        self.assertEqual(population.best_index(), 0)
        self.assertEqual(population.fitness(0), 0.5)


# =============================================================================
# ControlParameter Tests
# =============================================================================

class TestControlParameter(unittest.TestCase):
    """Per-slot value cache."""

    def test_initial_value_in_every_slot(self):
        parameter = build(multiple_parameter(5, 0.5))
        self.assertEqual(parameter.size(), 5)
        for i in range(5):
            self.assertEqual(parameter.load(i), 0.5)
            self.assertFalse(parameter.is_already_generated(i))

    def test_slots_are_independent(self):
        parameter = build(multiple_parameter(5, 0.5))
        parameter.save(0.9, 2)
        self.assertEqual(parameter.load(2), 0.9)
        self.assertTrue(parameter.is_already_generated(2))
        for i in (0, 1, 3, 4):
            self.assertEqual(parameter.load(i), 0.5)
            self.assertFalse(parameter.is_already_generated(i))
        parameter.reset_already_generated(2)
        self.assertFalse(parameter.is_already_generated(2))
        self.assertEqual(parameter.load(2), 0.9)

    def test_index_out_of_range(self):
        parameter = build(multiple_parameter(5, 0.5))
        with self.assertRaises(ParameterIndexError):
            parameter.load(5)
        with self.assertRaises(ParameterIndexError):
            parameter.save(0.1, -1)
        with self.assertRaises(ParameterIndexError):
            parameter.is_already_generated(7)

    def test_initial_value_from_function(self):
        parameter = build(multiple_parameter(20, {
            "classname": "RealUniformDisFunction",
            "lower_bound": const(0.2),
            "upper_bound": const(0.4),
        }))
        values = np.array([parameter.load(i) for i in range(20)])
        self.assertTrue(np.all((values >= 0.2) & (values < 0.4)))
        self.assertGreater(len(set(values.tolist())), 1)

    def test_absent_initial_value(self):
        real = build({"classname": "RealMultipleControlParameter", "number_of_objects": 2})
        integer = build({"classname": "IntegerMultipleControlParameter", "number_of_objects": 2})
        self.assertEqual(real.load(1), 0.0)
        self.assertEqual(integer.load(1), 0)

    def test_control_kind_starts_empty(self):
        parameter = build({"classname": "RealControlMultipleControlParameter", "number_of_objects": 3})
        self.assertIsNone(parameter.load(0))

    def test_initial_value_kind_checked(self):
        with self.assertRaises(TypeMismatchError):
            build(multiple_parameter(2, "high"))
        with self.assertRaises(TypeMismatchError):
            build({"classname": "IntegerMultipleControlParameter", "number_of_objects": 2,
                   "initial_value": const(0.5)})

    def test_zero_slots_rejected(self):
        with self.assertRaises(ConfigurationError):
            build(multiple_parameter(0))

    def test_single_parameter_ignores_index(self):
        parameter = build({"classname": "RealSingleControlParameter", "initial_value": 0.5})
        self.assertEqual(parameter.load(42), 0.5)
        parameter.save(0.3, 7)
        self.assertEqual(parameter.load(0), 0.3)
        self.assertTrue(parameter.is_already_generated(99))
        self.assertEqual(parameter.size(), 1)


# =============================================================================
# ControlRange Tests
# =============================================================================

class TestControlRange(unittest.TestCase):
    """Validity predicate."""

    def test_real_bounds_with_tolerance(self):
        control_range = build(real_range(0.0, 1.0))
        self.assertTrue(control_range.is_valid(0.0))
        self.assertTrue(control_range.is_valid(0.5))
        self.assertTrue(control_range.is_valid(1.0))
        self.assertTrue(control_range.is_valid(1.0 + 1e-17))
        self.assertFalse(control_range.is_valid(1.0 + 1e-9))
        self.assertFalse(control_range.is_valid(-1e-9))
        self.assertFalse(control_range.is_valid(float("nan")))

    def test_integer_bounds_exact(self):
        control_range = build({"classname": "IntegerControlRange", "lower_bound": 1, "upper_bound": 3})
        self.assertTrue(control_range.is_valid(1))
        self.assertTrue(control_range.is_valid(3))
        self.assertFalse(control_range.is_valid(0))
        self.assertFalse(control_range.is_valid(4))

    def test_control_kind_always_valid(self):
        control_range = build({"classname": "RealControlControlRange"})
        self.assertTrue(control_range.is_valid(None))
        self.assertTrue(control_range.is_valid(object()))

    def test_inverted_bounds_rejected(self):
        with self.assertRaises(ConfigurationError):
            build(real_range(1.0, 0.0))


# =============================================================================
# Selection / Update Tests
# =============================================================================

class TestControlSelection(unittest.TestCase):
    """Success feedback after evaluation."""

    def setUp(self):
        self.parameter = build(multiple_parameter(5, 0.5))
        self.parameter.save(0.8, 0)
        self.selection = build({"classname": "RealBetterOffspringControlSelection"})

    def test_records_improving_trial(self):
        function = build({"classname": "RealVariableFunction"})
        context = make_context(children=(4.0, 5.0, 5.0, 5.0, 5.0), index=0)
        self.selection.select(context, self.parameter, function)
        self.assertEqual(function.generate(), 0.8)

    def test_ignores_worse_trial(self):
        function = build({"classname": "RealVariableFunction"})
        context = make_context(children=(6.0, 5.0, 5.0, 5.0, 5.0), index=0)
        self.selection.select(context, self.parameter, function)
        self.assertEqual(function.generate(), 0.0)

    def test_rejected_feedback_raises(self):
        function = build({"classname": "RealNormalDisFunction", "mean": const(0.5), "stddev": const(0.1)})
        context = make_context(children=(4.0, 5.0, 5.0, 5.0, 5.0), index=0)
        with self.assertRaises(FeedbackRejectedError) as ctx:
            self.selection.select(context, self.parameter, function)
        self.assertIn('"object"', str(ctx.exception))

    def test_non_info_records_nothing(self):
        function = build({"classname": "RealVariableFunction"})
        selection = build({"classname": "NonInfoControlSelection"})
        selection.select(make_context(children=(0.0,) * 5), self.parameter, function)
        self.assertEqual(function.generate(), 0.0)


class TestControlUpdate(unittest.TestCase):
    """Observations injected before generation."""

    def receiver(self):
        return build({
            "classname": "IsadeFFunction",
            "object": {"classname": "RealVariableFunction", "object": 0.5},
            "min": {"classname": "RealVariableFunction"},
            "average": {"classname": "RealVariableFunction"},
            "current": {"classname": "RealVariableFunction"},
        })

    def test_fitness_updates(self):
        function = self.receiver()
        parameter = build(multiple_parameter())
        context = make_context(index=1)
        for name in ("Min", "Average", "Current"):
            update = build({"classname": f"{name}FitnessControlUpdate"})
            update.update(context, parameter, function)
        self.assertEqual(function.child("min").generate(), 1.0)
        self.assertEqual(function.child("average").generate(), 3.0)
        self.assertEqual(function.child("current").generate(), 4.0)

    def test_missing_receiver_raises(self):
        update = build({"classname": "MaxFitnessControlUpdate"})
        with self.assertRaises(FeedbackRejectedError):
            update.update(make_context(), build(multiple_parameter()), self.receiver())

    def test_generation_update(self):
        function = build({
            "classname": "RealLearningPeriodFunction",
            "learning_period": 10,
            "object": const(0.5),
        })
        update = build({"classname": "GenerationControlUpdate"})
        update.update(make_context(generation=12), build(multiple_parameter()), function)
        self.assertEqual(function.child("generation").generate(), 12)

    def test_sde_update_draws_distinct_slots(self):
        parameter = build(multiple_parameter())
        for i, value in enumerate((0.1, 0.2, 0.3, 0.4, 0.5)):
            parameter.save(value, i)
        function = build({"classname": "SdeFFunction", "number_of_parameters": 3, "rand": const(0.5)})
        update = build({"classname": "SdeFControlUpdate"})
        update.update(make_context(), parameter, function)
        self.assertEqual(len(set(function.parameters)), 3)
        self.assertTrue(set(function.parameters) <= {0.1, 0.2, 0.3, 0.4, 0.5})

    def test_sde_update_needs_enough_individuals(self):
        function = build({"classname": "SdeFFunction", "number_of_parameters": 7, "rand": const(0.5)})
        update = build({"classname": "SdeFControlUpdate"})
        with self.assertRaises(ValueError):
            update.update(make_context(), build(multiple_parameter()), function)


# =============================================================================
# ControlMechanism Tests
# =============================================================================

class TestControlMechanism(unittest.TestCase):
    """generate / select / update cycle."""

    def uniform(self, low=0.0, high=1.0):
        return {
            "classname": "RealUniformDisFunction",
            "lower_bound": const(low),
            "upper_bound": const(high),
        }

    def test_constant_example(self):
        control = build(mechanism(const(0.5), updates=[{"classname": "GenerationControlUpdate"}]))
        context = make_context()
        control.update(context)
        self.assertEqual(control.generate(context), 0.5)

    def test_generate_is_cached_within_cycle(self):
        control = build(mechanism(self.uniform()))
        context = make_context(index=2)
        first = control.generate(context)
        self.assertEqual(control.generate(context), first)
        self.assertEqual(control.generate(context), first)
        self.assertTrue(control.parameter.is_already_generated(2))
        self.assertFalse(control.parameter.is_already_generated(1))

        control.update(context)
        self.assertFalse(control.parameter.is_already_generated(2))
        self.assertNotEqual(control.generate(context), first)

    def test_values_respect_range(self):
        data = mechanism(self.uniform())
        data["ControlRange"] = real_range(0.4, 0.6)
        control = build(data)
        context = make_context()
        for _ in range(100):
            control.update(context)
            value = control.generate(context)
            self.assertGreaterEqual(value, 0.4)
            self.assertLessEqual(value, 0.6)

    def test_max_attempts_exhausted(self):
        control = build(mechanism(const(2.0), max_attempts=5))
        with self.assertRaises(RangeExhaustedError):
            control.generate(make_context())

    def test_max_attempts_must_be_positive(self):
        with self.assertRaises(ConfigurationError):
            build(mechanism(const(0.5), max_attempts=0))

    def test_part_kinds_checked(self):
        data = mechanism(const(0.5))
        data["ControlRange"] = {"classname": "IntegerControlRange", "lower_bound": 0, "upper_bound": 1}
        with self.assertRaises(TypeMismatchError):
            build(data)

    def test_function_kind_checked(self):
        data = mechanism({"classname": "IntegerConstantFunction", "object": 1})
        with self.assertRaises(TypeMismatchError):
            build(data)

    def test_unknown_nested_classname(self):
        with self.assertRaises(UnknownTypeError):
            build(mechanism({"classname": "RealMysteryFunction"}))

    def test_missing_part(self):
        data = mechanism(const(0.5))
        del data["ControlSelection"]
        with self.assertRaises(ConfigurationError):
            build(data)

    def test_jde_cycle_feeds_back_per_slot(self):
        jde = {
            "classname": "JdeFFunction",
            "object": {"classname": "RealVariableFunction", "object": 0.5},
            "tau": const(1.0),
        }
        control = build(mechanism(
            None,
            control_function={"classname": "MultipleControlFunction", "number_of_functions": 5, "Function": jde},
            selection={"classname": "RealBetterOffspringControlSelection"},
        ))
        context = make_context(children=(4.0, 5.0, 5.0, 5.0, 5.0), index=0)
        value = control.generate(context)
        control.select(context)
        control.update(context)
        self.assertEqual(control.function.at(0).object, value)
        self.assertEqual(control.function.at(1).object, 0.5)
        with self.assertRaises(ParameterIndexError):
            control.function.at(5)

    def test_clone_is_independent(self):
        function = {
            "classname": "RealLearningPeriodFunction",
            "learning_period": 1,
            "object": {"classname": "RealMedianFunction", "storage_size": 10, "initial_value": 0.5},
        }
        data = mechanism(function, selection={"classname": "RealBetterOffspringControlSelection"})
        data["ControlParameter"] = multiple_parameter(5, 0.9)
        original = build(data)
        clone = original.clone()
        self.assertIs(clone.function.at(0).random, original.function.at(0).random)

        context = make_context(children=(4.0, 5.0, 5.0, 5.0, 5.0), index=0)
        clone.select(context)
        clone.update(context)
        original.update(context)
        self.assertEqual(clone.generate(context), 0.9)
        self.assertEqual(original.generate(context), 0.5)


class TestMechanismVariants(unittest.TestCase):
    """Indirect, SaDE-CR and SDE-F mechanisms."""

    def indirect(self, nested_classname="RealControlControlMechanism"):
        return {
            "classname": "RealIndirectControlMechanism",
            "ControlRange": real_range(),
            "ControlParameter": multiple_parameter(),
            "ControlSelection": {"classname": "NonInfoControlSelection"},
            "ControlUpdate": [],
            "ControlMechanism": {
                "classname": nested_classname,
                "ControlRange": {"classname": "RealControlControlRange"},
                "ControlParameter": {"classname": "RealControlMultipleControlParameter", "number_of_objects": 5},
                "ControlFunction": single_function({
                    "classname": "RealControlRouletteWheelSelectionFunction",
                    "score_size": 10,
                    "object": [const(0.2), const(0.8)],
                }),
                "ControlSelection": {"classname": "RealControlBetterOffspringControlSelection"},
                "ControlUpdate": [],
            },
        }

    def test_indirect_generates_from_chosen_strategy(self):
        control = build(self.indirect())
        context = make_context()
        self.assertIn(control.generate(context), (0.2, 0.8))

    def test_indirect_learns_strategy(self):
        control = build(self.indirect())
        context = make_context(children=(4.0, 5.0, 5.0, 5.0, 5.0), index=0)
        value = control.generate(context)
        control.select(context)
        control.update(context)

        roulette = control.mechanism.function.at(0)
        expected = [1.0, 0.0] if value == 0.2 else [0.0, 1.0]
        np.testing.assert_array_equal(roulette.scores, expected)
        self.assertFalse(control.mechanism.parameter.is_already_generated(0))

    def test_indirect_nested_kind_checked(self):
        data = self.indirect()
        data["classname"] = "IntegerIndirectControlMechanism"
        data["ControlRange"] = {"classname": "IntegerControlRange", "lower_bound": 0, "upper_bound": 1}
        data["ControlParameter"] = {"classname": "IntegerMultipleControlParameter", "number_of_objects": 5}
        with self.assertRaises(TypeMismatchError):
            build(data)

    def test_sade_cr_records_into_mean(self):
        function = {
            "classname": "RealNormalDisFunction",
            "mean": {
                "classname": "RealLearningPeriodFunction",
                "learning_period": 1,
                "object": {"classname": "RealMedianFunction", "storage_size": 10, "initial_value": 0.5},
            },
            "stddev": const(0.0),
        }
        data = mechanism(
            function,
            classname="SadeCrControlMechanism",
            selection={"classname": "RealBetterOffspringControlSelection"},
            updates=[{"classname": "GenerationControlUpdate"}],
        )
        data["ControlParameter"] = multiple_parameter(5, 0.9)
        control = build(data)
        context = make_context(children=(4.0, 5.0, 5.0, 5.0, 5.0), index=0)
        control.select(context)
        control.update(context)
        self.assertEqual(control.generate(context), 0.9)

    def test_sade_cr_requires_mean(self):
        data = mechanism(const(0.5), classname="SadeCrControlMechanism")
        with self.assertRaises(ConfigurationError):
            build(data)

    def test_sde_folds_out_of_range(self):
        function = {"classname": "SdeFFunction", "number_of_parameters": 3, "rand": const(0.5)}
        control = build(mechanism(function, classname="SdeFControlMechanism"))
        control.function.at(0).record([1.7, 0.0, 0.0])
        self.assertAlmostEqual(control.generate(make_context()), 0.7)

    def test_sde_update_feeds_parameters(self):
        function = {"classname": "SdeFFunction", "number_of_parameters": 3, "rand": const(0.0)}
        data = mechanism(function, classname="SdeFControlMechanism",
                         updates=[{"classname": "SdeFControlUpdate"}])
        data["ControlParameter"] = multiple_parameter(5, 0.25)
        control = build(data)
        context = make_context()
        control.update(context)
        self.assertEqual(control.generate(context), 0.25)


if __name__ == '__main__':
    unittest.main(verbosity=2)
