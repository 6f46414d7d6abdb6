# Example 1.18: damped, forced harmonic oscillator integrated with the fixed
# step RK routine and compared with the closed-form solution.
import argparse
import time
import numpy as np
from rungekutta import integrate
from oscillator import OscillatorParams, analytical_solution, build_system
from helpers import (print_trajectory, write_trajectory, plot_trajectory,
                     plot_convergence, max_error, observed_orders)

# Hyperparameters oscillator
F0 = 1.0
m = 1.0
om_n = 1.0
zeta = 0.03
om = 0.4 * om_n

# Hyperparameters time integration
start_time = 0.0
final_time = 110.0
initial_state = (0.0, 0.0)
rk = 4
h = 1.0

# Hyperparameters output
output_file = "./data/ex_01_18b.txt"
plot_file = "./plots/ex_01_18b.png"
convergence_plot_file = "./plots/rk_convergence.png"
step_sizes = [0.2, 0.1, 0.05, 0.025]
convergence_final_time = 20.0

def oscillator_params():
    return OscillatorParams(F0=F0, m=m, om_n=om_n, zeta=zeta, om=om)

def run(rk=rk, h=h, final_time=final_time, output_file=output_file,
        plot_file=plot_file, plot=True):
    p = oscillator_params()
    system = build_system(p, start_time, final_time, initial_state)
    print(f"Integrating {system} with RK{rk}, h={h}.")

    start = time.perf_counter()
    trajectory = integrate(system, rk, h)
    end = time.perf_counter()
    print(f"{trajectory.num_steps} samples in {end - start:.4f} s.")

    x_a = analytical_solution(trajectory.times, system.initial_state, p)
    print_trajectory("t, x, v", trajectory)
    print(f"Max |x - x_a|: {max_error(trajectory.component(0), x_a)}")

    if output_file:
        write_trajectory(output_file, trajectory, x_a)
        print(f"Saved {output_file}")
    if plot:
        plot_trajectory(trajectory, x_a, plot_file,
                        title=f"Example 18 Chapter 01: Simple Harmonic Oscillator using RK{rk}")
    return trajectory, x_a

def run_convergence(step_sizes=step_sizes, final_time=convergence_final_time,
                    plot_file=convergence_plot_file, plot=True):
    p = oscillator_params()
    system = build_system(p, start_time, final_time, initial_state)

    errors = {1: [], 2: [], 3: [], 4: []}
    for order in [1, 2, 3, 4]:
        for step in step_sizes:
            print(f"Running experiment: rk={order}, h={step}.")
            trajectory = integrate(system, order, step)
            x_a = analytical_solution(trajectory.times, system.initial_state, p)
            errors[order].append(max_error(trajectory.component(0), x_a))
        rates = observed_orders(step_sizes, errors[order])
        with np.printoptions(precision=2):
            print(f"RK{order} errors: {errors[order]}, observed orders: {rates}")

    if plot:
        plot_convergence(step_sizes, errors, plot_file)
    return step_sizes, errors

def main(argv=None):
    ap = argparse.ArgumentParser(description="Forced damped oscillator with a fixed-step RK method.")
    ap.add_argument("--rk", type=int, default=rk, choices=[1, 2, 3, 4])
    ap.add_argument("--h", type=float, default=h, help="Step size.")
    ap.add_argument("--final-time", type=float, default=None)
    ap.add_argument("--output", default=output_file, help="Result file, empty to skip.")
    ap.add_argument("--plot", default=plot_file)
    ap.add_argument("--no-plot", action="store_true")
    ap.add_argument("--convergence", action="store_true",
                    help="Run the step-size study for RK1-RK4 instead.")
    args = ap.parse_args(argv)

    if args.convergence:
        final = convergence_final_time if args.final_time is None else args.final_time
        run_convergence(final_time=final, plot=not args.no_plot)
    else:
        final = final_time if args.final_time is None else args.final_time
        run(rk=args.rk, h=args.h, final_time=final, output_file=args.output,
            plot_file=args.plot, plot=not args.no_plot)
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
